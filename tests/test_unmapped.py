"""
Tests for unmapped attribute analysis.
"""
from canonical_mapper.store import UNSET
from canonical_mapper.unmapped import mapped_count, mapped_set, unmapped, unmapped_report


def _current(store, provider_id):
    return next(p for p in store.dataset["providers"] if p["id"] == provider_id)


class TestUnmapped:
    """Set difference between provider attributes and mapped ones"""

    def test_sleep_scenario(self, store, garmin):
        """garmin with one mapped attribute has one unmapped left"""
        field = store.add_canonical_field()
        store.rename_canonical_field(field["id"], "duration")
        store.set_mapping(field["id"], garmin["id"], "sleep.duration")

        assert unmapped(store.dataset, garmin) == ["sleep.stage"]
        assert mapped_count(store.dataset, garmin) == 1

    def test_nothing_mapped(self, store, garmin):
        assert unmapped(store.dataset, garmin) == garmin["flatKeys"]
        assert mapped_count(store.dataset, garmin) == 0

    def test_count_is_distinct_attributes(self, store, garmin):
        """Two fields pointing at the same attribute count once"""
        for _ in range(2):
            field = store.add_canonical_field()
            store.set_mapping(field["id"], garmin["id"], "sleep.duration")
        assert mapped_count(store.dataset, garmin) == 1
        assert unmapped(store.dataset, garmin) == ["sleep.stage"]

    def test_mappings_of_other_providers_ignored(self, store, garmin, suunto):
        field = store.add_canonical_field()
        store.set_mapping(field["id"], suunto["id"], "sleep.duration")
        assert unmapped(store.dataset, garmin) == ["sleep.duration", "sleep.stage"]

    def test_search_is_case_insensitive(self, store, suunto):
        assert unmapped(store.dataset, suunto, "DURATION") == ["entry.Duration"]
        assert unmapped(store.dataset, suunto, "hr") == ["entry.HR.0.avg"]
        assert unmapped(store.dataset, suunto, "nope") == []

    def test_empty_search_term_does_not_filter(self, store, suunto):
        assert unmapped(store.dataset, suunto, "") == suunto["flatKeys"]

    def test_partition_holds_after_many_changes(self, store, garmin):
        fields = [store.add_canonical_field() for _ in range(3)]
        steps = [
            (0, "sleep.duration"), (1, "sleep.stage"), (2, "sleep.duration"),
            (1, UNSET), (0, "dangling.key"), (2, UNSET),
        ]
        for index, key in steps:
            store.set_mapping(fields[index]["id"], garmin["id"], key)
            provider = _current(store, garmin["id"])
            left = set(unmapped(store.dataset, provider))
            mapped = mapped_set(store.dataset, provider)
            assert left | mapped == set(provider["flatKeys"])
            assert not left & mapped

    def test_stale_reference_is_not_counted(self, store, garmin):
        field = store.add_canonical_field()
        store.set_mapping(field["id"], garmin["id"], "gone")
        assert mapped_count(store.dataset, garmin) == 0

    def test_tolerates_malformed_provider(self):
        dataset = {"name": "", "providers": [{"id": "p"}], "canonicalFields": [{"id": "f"}]}
        assert unmapped(dataset, dataset["providers"][0]) == []


class TestUnmappedReport:
    """Per-provider report used by the unmapped panel"""

    def test_report(self, store, garmin, suunto):
        field = store.add_canonical_field()
        store.set_mapping(field["id"], garmin["id"], "sleep.duration")

        report = unmapped_report(store.dataset, "stage")

        assert report["total_unmapped"] == 1
        garmin_entry, suunto_entry = report["providers"]
        assert garmin_entry["provider"]["id"] == garmin["id"]
        assert garmin_entry["unmapped"] == [{"key": "sleep.stage", "sample": "deep"}]
        assert suunto_entry["unmapped"] == []
