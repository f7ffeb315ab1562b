import gradio as gr
from functools import partial

from canonical_mapper.handlers_mapping import (
    UNMAPPED_CHOICE,
    add_canonical_field_handler,
    export_csv_handler,
    export_json_handler,
    import_dataset_handler,
    load_demo_handler,
    mapping_choices,
    remove_canonical_field_handler,
    rename_canonical_field_handler,
    rename_dataset_handler,
    reset_session_handler,
    sample_preview,
    set_mapping_handler,
)
from canonical_mapper.handlers_providers import (
    PROVIDER_HEADERS,
    UNMAPPED_HEADERS,
    add_provider_handler,
    refresh_views,
    remove_provider_handler,
    search_unmapped_handler,
    select_unmapped_attribute,
    suggest_provider_name,
)
from canonical_mapper.logging_config import setup_structured_logging
from canonical_mapper.models import empty_dataset, flat_keys_of, iter_records, mappings_of
from canonical_mapper.settings import get_settings
from canonical_mapper.storage import JsonFileStorage
from canonical_mapper.store import MappingStore

settings = get_settings()
setup_structured_logging(
    log_level=settings.log_level,
    log_file=settings.log_file,
    json_logs=settings.json_logs,
)
store = MappingStore.from_storage(JsonFileStorage(settings.storage_path))

# --- UI Definition ---
with gr.Blocks(title="Canonical Mapper") as demo:
    gr.Markdown("# Canonical Mapper")
    gr.Markdown("Upload provider JSON files and map their attributes onto shared canonical fields.")

    # State
    dataset_state = gr.State()

    with gr.Row():
        dataset_name = gr.Textbox(label="Dataset", placeholder="Enter dataset name", scale=2)
        confirm_destructive = gr.Checkbox(label="Confirm destructive actions", value=False, scale=1)
        demo_btn = gr.Button("Demo", variant="secondary")
        reset_btn = gr.Button("Clear Session", variant="stop")
    status_msg = gr.Textbox(label="Status", interactive=False)

    with gr.Row():
        # Left Panel: Providers
        with gr.Column(scale=1):
            gr.Markdown("### 1. Add Provider")
            provider_name = gr.Textbox(label="Provider Name", placeholder="e.g. apple, fitbit")
            provider_file = gr.File(label="JSON Schema File", file_types=[".json"])
            add_provider_btn = gr.Button("Add Provider", variant="primary")

            gr.Markdown("### Providers")
            provider_table = gr.Dataframe(
                headers=PROVIDER_HEADERS,
                datatype=["str", "number", "number"],
                col_count=(3, "fixed"),
                interactive=False,
                label="Providers",
            )
            provider_selector = gr.Dropdown(label="Provider", choices=[], value=None, interactive=True)
            remove_provider_btn = gr.Button("Remove Provider", variant="stop")

        # Right Panel: Unmapped Attributes
        with gr.Column(scale=1):
            gr.Markdown("### 2. Unmapped Attributes")
            unmapped_search = gr.Textbox(label="Search attributes", placeholder="Search attributes...")
            unmapped_summary = gr.Markdown()
            unmapped_table = gr.Dataframe(
                headers=UNMAPPED_HEADERS,
                datatype=["str", "str", "str"],
                col_count=(3, "fixed"),
                interactive=False,
                label="Unmapped",
            )
            copy_box = gr.Textbox(
                label="Selected attribute (click a row)",
                interactive=False,
                show_copy_button=True,
            )

    gr.Markdown("### 3. Schema Mapping")
    add_field_btn = gr.Button("Add Field")

    view_outputs = [dataset_state, dataset_name, provider_selector, provider_table, unmapped_table, unmapped_summary]
    status_and_views = [status_msg, *view_outputs]

    @gr.render(inputs=[dataset_state], triggers=[dataset_state.change, demo.load])
    def render_mapping_table(dataset):
        dataset = dataset or empty_dataset()
        providers = list(iter_records(dataset.get('providers')))
        fields = list(iter_records(dataset.get('canonicalFields')))

        if not fields:
            gr.Markdown("No canonical fields defined. Use **Add Field** to start mapping.")
            return

        with gr.Row():
            gr.Markdown("**Canonical**")
            for provider in providers:
                gr.Markdown(f"**{provider.get('name', '')}** ({len(flat_keys_of(provider))} keys)")
            gr.Markdown("")

        for field in fields:
            field_id = field.get('id')
            with gr.Row():
                name_box = gr.Textbox(value=field.get('name', ''), placeholder="field_name", show_label=False)
                for event in (name_box.blur, name_box.submit):
                    event(
                        fn=partial(rename_canonical_field_handler, store, field_id),
                        inputs=[name_box, unmapped_search],
                        outputs=status_and_views,
                    )

                for provider in providers:
                    key = mappings_of(field).get(provider.get('id'))
                    with gr.Column():
                        selector = gr.Dropdown(
                            choices=mapping_choices(provider),
                            value=key if key is not None else UNMAPPED_CHOICE,
                            show_label=False,
                            filterable=True,
                            allow_custom_value=True,
                            interactive=True,
                        )
                        gr.Markdown(sample_preview(provider, key))
                    selector.input(
                        fn=partial(set_mapping_handler, store, field_id, provider.get('id')),
                        inputs=[selector, unmapped_search],
                        outputs=status_and_views,
                    )

                delete_btn = gr.Button("Delete Field", size="sm", variant="stop")
                delete_btn.click(
                    fn=partial(remove_canonical_field_handler, store, field_id),
                    inputs=[unmapped_search],
                    outputs=status_and_views,
                )

    gr.Markdown("### 4. Import / Export")
    with gr.Row():
        with gr.Column():
            import_file = gr.File(label="Import dataset (.json)", file_types=[".json"])
        with gr.Column():
            export_json_btn = gr.Button("Export JSON", variant="primary")
            export_csv_btn = gr.Button("Export CSV")
            download_output = gr.File(label="Download Result")

    def on_unmapped_select(search_term, evt: gr.SelectData):
        return select_unmapped_attribute(store, search_term, evt)

    demo.load(
        fn=partial(refresh_views, store),
        inputs=[unmapped_search],
        outputs=view_outputs,
    )

    for event in (dataset_name.blur, dataset_name.submit):
        event(
            fn=partial(rename_dataset_handler, store),
            inputs=[dataset_name, unmapped_search],
            outputs=status_and_views,
        )

    provider_file.upload(
        fn=suggest_provider_name,
        inputs=[provider_file, provider_name],
        outputs=[provider_name],
    )

    add_provider_btn.click(
        fn=partial(add_provider_handler, store),
        inputs=[provider_name, provider_file, unmapped_search],
        outputs=[status_msg, provider_name, provider_file, *view_outputs],
    )

    remove_provider_btn.click(
        fn=partial(remove_provider_handler, store),
        inputs=[provider_selector, confirm_destructive, unmapped_search],
        outputs=status_and_views,
    )

    unmapped_search.change(
        fn=partial(search_unmapped_handler, store),
        inputs=[unmapped_search],
        outputs=[unmapped_table, unmapped_summary],
    )

    unmapped_table.select(
        fn=on_unmapped_select,
        inputs=[unmapped_search],
        outputs=[copy_box],
    )

    add_field_btn.click(
        fn=partial(add_canonical_field_handler, store),
        inputs=[unmapped_search],
        outputs=status_and_views,
    )

    demo_btn.click(
        fn=partial(load_demo_handler, store),
        inputs=[confirm_destructive, unmapped_search],
        outputs=status_and_views,
    )

    reset_btn.click(
        fn=partial(reset_session_handler, store),
        inputs=[confirm_destructive, unmapped_search],
        outputs=status_and_views,
    )

    import_file.upload(
        fn=partial(import_dataset_handler, store),
        inputs=[import_file, confirm_destructive, unmapped_search],
        outputs=status_and_views,
    )

    export_json_btn.click(
        fn=partial(export_json_handler, store),
        outputs=[download_output, status_msg],
    )

    export_csv_btn.click(
        fn=partial(export_csv_handler, store),
        outputs=[download_output, status_msg],
    )

if __name__ == "__main__":
    demo.launch(server_name=settings.server_name, server_port=settings.server_port)
