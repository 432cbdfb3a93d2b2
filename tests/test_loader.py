# tests/test_loader.py
import json
from pathlib import Path

import pytest

from institution_recommender.loader import (
    find_data_files, load_datasets, normalize_dataset_name, read_records, split_records,
)
from institution_recommender.registry import ModelRegistry


@pytest.mark.parametrize("path, key", [
    ("data/SEE_college.json", "see"),
    ("plus_two_college.json", "plusTwo"),
    ("nested/bachelor_job.csv", "bachelor"),
    ("grades.json", "grades"),
])
def test_normalize_dataset_name(path, key):
    assert normalize_dataset_name(path) == key


def test_find_data_files_walks_subfolders(data_dir: Path):
    (data_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    files = [Path(p).name for p in find_data_files(str(data_dir))]
    assert files == ["see_college.json", "bachelor_job.csv"]


def test_read_records_keeps_values_as_strings(data_dir: Path, see_records):
    records = read_records(str(data_dir / "see_college.json"))
    assert records == see_records
    csv_records = read_records(str(data_dir / "nested" / "bachelor_job.csv"))
    assert csv_records[0] == {'Academic_Stream': 'CS', 'Internship': 'Yes', 'Suggested_Job_Role': 'Developer'}


def test_read_records_fills_missing_cells(tmp_path: Path):
    path = tmp_path / "gaps.csv"
    path.write_text("A,T\nx,yes\n,no\n", encoding="utf-8")
    assert read_records(str(path)) == [{'A': 'x', 'T': 'yes'}, {'A': '', 'T': 'no'}]


def test_split_records_without_ratio_keeps_everything(see_records):
    train, test = split_records(see_records, 0.0)
    assert train == see_records
    assert test == []


def test_split_records_holds_out_a_fraction(see_records):
    train, test = split_records(see_records, 0.4, random_state=42)
    assert len(train) == 3
    assert len(test) == 2
    assert sorted(map(str, train + test)) == sorted(map(str, see_records))
    # same seed, same split
    assert split_records(see_records, 0.4, random_state=42) == (train, test)


def test_load_datasets(data_dir: Path):
    datasets = load_datasets(str(data_dir), test_ratio=0)
    assert [d.key for d in datasets] == ["see", "bachelor"]
    assert len(datasets[0].records) == 5
    assert datasets[0].test_records == ()


def test_load_datasets_skips_unreadable_files(data_dir: Path):
    (data_dir / "broken.json").write_text("{not json", encoding="utf-8")
    keys = [d.key for d in load_datasets(str(data_dir), test_ratio=0)]
    assert "broken" not in keys
    assert "see" in keys


def test_load_datasets_missing_directory(tmp_path: Path):
    assert load_datasets(str(tmp_path / "nowhere")) == []


def test_loaded_datasets_build_models(data_dir: Path):
    registry = ModelRegistry()
    registry.build_all(load_datasets(str(data_dir), test_ratio=0))
    assert registry.dataset_keys() == ["see", "bachelor"]
    assert registry.predict("bachelor", {'Academic_Stream': 'BBA', 'Internship': 'Yes'}) == 'Analyst'


def test_read_records_json_keeps_integer_tokens(tmp_path: Path):
    path = tmp_path / "tiers.json"
    path.write_text(json.dumps([
        {'Tier': 1, 'Hostel': True, 'College': 'A'},
        {'Tier': None, 'Hostel': False, 'College': 'B'},
        {'Rank': 2, 'College': 'C'},
    ]), encoding="utf-8")

    records = read_records(str(path))
    assert records == [
        {'Tier': '1', 'Hostel': 'true', 'College': 'A'},
        {'Tier': '', 'Hostel': 'false', 'College': 'B'},
        {'Rank': '2', 'College': 'C'},
    ]


def test_loaded_integer_tokens_validate_against_client_input(tmp_path: Path):
    base = tmp_path / "data"
    base.mkdir()
    (base / "grades.json").write_text(json.dumps([
        {'Grade': 1, 'College': 'A'},
        {'Grade': None, 'College': 'B'},
        {'Grade': 2, 'College': 'B'},
    ]), encoding="utf-8")

    registry = ModelRegistry()
    registry.build_all(load_datasets(str(base), test_ratio=0))
    assert registry.validate({'Grade': '1'}, 'grades').valid
    assert registry.predict('grades', {'Grade': '1'}) == 'A'


def test_read_records_rejects_non_list_json(tmp_path: Path):
    path = tmp_path / "single.json"
    path.write_text(json.dumps({'A': 'x'}), encoding="utf-8")
    with pytest.raises(ValueError):
        read_records(str(path))
