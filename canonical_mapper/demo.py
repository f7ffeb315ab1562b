from __future__ import annotations

import json
from pathlib import Path
from typing import Tuple

from .models import Dataset, build_provider

SAMPLES_DIR = Path(__file__).parent / 'samples' / 'sleep'
DEMO_DATASET_NAME = 'Sleep Data Mapping'
DEMO_PROVIDERS: Tuple[str, ...] = ('suunto', 'garmin', 'apple')


def build_demo_dataset() -> Dataset:
    """Three sleep-data providers built from the bundled sample files, no fields yet."""
    providers = []
    for name in DEMO_PROVIDERS:
        with open(SAMPLES_DIR / f'{name}.json', 'r', encoding='utf-8') as f:
            providers.append(build_provider(name, json.load(f)))
    return {'name': DEMO_DATASET_NAME, 'providers': providers, 'canonicalFields': []}
