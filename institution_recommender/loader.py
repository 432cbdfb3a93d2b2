# institution_recommender/loader.py
"""
Training data discovery for the model registry.

Walks the data directory for .json / .csv files, reads each into a list of
flat string records and maps the file name onto a dataset key:
 - *see*       -> 'see'
 - *plus*      -> 'plusTwo'
 - *bachelor*  -> 'bachelor'
 - anything else keeps its file name (without extension)
"""
import json
import os

import pandas as pd
from loguru import logger
from sklearn.model_selection import train_test_split

from . import config
from .registry import Dataset

DATA_EXTENSIONS = ('.json', '.csv')


def normalize_dataset_name(path):
    base = os.path.basename(path).lower()
    if 'see' in base:
        return 'see'
    if 'plus' in base:
        return 'plusTwo'
    if 'bachelor' in base:
        return 'bachelor'
    return os.path.splitext(os.path.basename(path))[0]


def find_data_files(data_dir):
    """All training files under data_dir (subfolders included), in a stable order."""
    found = []
    for root, dirs, files in os.walk(data_dir):
        dirs.sort()
        for name in sorted(files):
            if name.lower().endswith(DATA_EXTENSIONS):
                found.append(os.path.join(root, name))
    return found


def _token(value):
    # JSON scalars keep their source spelling: 1 -> '1', true -> 'true', null -> ''
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return json.dumps(value)


def read_records(path):
    """
    Read one file into a list of dicts with string values.
    - CSV: every column present, '' for empty cells
    - JSON: each record keeps its own keys; values are stringified one by one
    """
    if path.lower().endswith('.csv'):
        df = pd.read_csv(path, dtype=str)
        df.columns = [str(c).strip() for c in df.columns]
        df = df.fillna('')
        return df.to_dict(orient='records')

    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of records in {path}")
    if not all(isinstance(row, dict) for row in data):
        raise ValueError(f"Every record in {path} must be an object")
    return [{str(k).strip(): _token(v) for k, v in row.items()} for row in data]


def split_records(records, test_ratio=0.0, random_state=42):
    """
    Hold out `test_ratio` of the records for evaluation.
    Returns (train, test); with a ratio of 0 (or too few rows) everything is training data.
    """
    test_size = int(len(records) * test_ratio)
    if test_size <= 0 or test_size >= len(records):
        return list(records), []
    train, test = train_test_split(list(records), test_size=test_size, random_state=random_state)
    return train, test


def load_datasets(data_dir=None, test_ratio=None, random_state=None):
    """Read every training file under data_dir into Dataset objects."""
    data_dir = data_dir or config.DATA_DIR
    test_ratio = config.TEST_RATIO if test_ratio is None else test_ratio
    random_state = config.RANDOM_STATE if random_state is None else random_state

    if not os.path.isdir(data_dir):
        logger.warning(f"Training data directory not found: {data_dir}")
        return []

    files = find_data_files(data_dir)
    if not files:
        logger.warning(f"No training files found in {data_dir}")

    datasets = []
    for path in files:
        try:
            records = read_records(path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read/parse training file {path}: {e}")
            continue

        key = normalize_dataset_name(path)
        train, test = split_records(records, test_ratio, random_state)
        datasets.append(Dataset(key, train, test))
        logger.info(f"Loaded {len(records)} records from {path} as dataset '{key}' "
                    f"({len(train)} training, {len(test)} held out)")
    return datasets
