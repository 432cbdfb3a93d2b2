# tests/conftest.py
import json

import pytest
from loguru import logger

from institution_recommender.app import create_app
from institution_recommender.registry import Dataset, ModelRegistry


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def toy_records():
    return [
        {'A': 'x', 'T': 'yes'},
        {'A': 'x', 'T': 'yes'},
        {'A': 'y', 'T': 'no'},
    ]


@pytest.fixture
def see_records():
    # SEE-style rows: target 'College', 'Tier' is auxiliary
    return [
        {'SEE_GPA': '3.6-4.0', 'Fee': 'High', 'Hostel': 'Yes', 'Tier': '1', 'College': 'St. Xavier'},
        {'SEE_GPA': '3.6-4.0', 'Fee': 'Low', 'Hostel': 'Yes', 'Tier': '1', 'College': 'Budhanilkantha'},
        {'SEE_GPA': '2.8-3.6', 'Fee': 'Low', 'Hostel': 'No', 'Tier': '2', 'College': 'Trinity'},
        {'SEE_GPA': '2.8-3.6', 'Fee': 'High', 'Hostel': 'No', 'Tier': '2', 'College': 'Trinity'},
        {'SEE_GPA': '2.0-2.8', 'Fee': 'Low', 'Hostel': 'No', 'Tier': '3', 'College': 'Trinity'},
    ]


@pytest.fixture
def bachelor_records():
    return [
        {'Academic_Stream': 'CS', 'Internship': 'Yes', 'Suggested_Job_Role': 'Developer'},
        {'Academic_Stream': 'CS', 'Internship': 'No', 'Suggested_Job_Role': 'Tester'},
        {'Academic_Stream': 'BBA', 'Internship': 'Yes', 'Suggested_Job_Role': 'Analyst'},
    ]


@pytest.fixture
def registry(see_records, bachelor_records):
    reg = ModelRegistry()
    held_out = [
        {'SEE_GPA': '3.6-4.0', 'Fee': 'High', 'Hostel': 'Yes', 'Tier': '1', 'College': 'St. Xavier'},
        {'SEE_GPA': '2.0-2.8', 'Fee': 'High', 'Hostel': 'No', 'Tier': '3', 'College': 'Budhanilkantha'},
    ]
    reg.build(Dataset('see', see_records, held_out))
    reg.build(Dataset('bachelor', bachelor_records))
    return reg


@pytest.fixture
def client(registry):
    app = create_app(registry=registry, test_config={'TESTING': True})
    return app.test_client()


@pytest.fixture
def data_dir(tmp_path, see_records, bachelor_records):
    """
    <tmp>/trainingDataSets/
        see_college.json
        nested/bachelor_job.csv
    """
    base = tmp_path / "trainingDataSets"
    (base / "nested").mkdir(parents=True)
    (base / "see_college.json").write_text(json.dumps(see_records), encoding="utf-8")

    columns = list(bachelor_records[0])
    lines = [",".join(columns)] + [",".join(r[c] for c in columns) for r in bachelor_records]
    (base / "nested" / "bachelor_job.csv").write_text("\n".join(lines) + "\n", encoding="utf-8")
    return base
