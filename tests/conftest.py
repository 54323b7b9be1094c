"""
Shared pytest fixtures.

Every test gets its own public directory so the store files never leak
between tests or into the working tree.
"""

import json

import pytest
from fastapi.testclient import TestClient

from blockfreelance.project_store import ProjectStore
from main import create_app


@pytest.fixture
def public_dir(tmp_path):
    return tmp_path


@pytest.fixture
def data_file(public_dir):
    return public_dir / "project.json"


@pytest.fixture
def legacy_file(public_dir):
    return public_dir / "projects.json"


@pytest.fixture
def store(data_file, legacy_file) -> ProjectStore:
    return ProjectStore(str(data_file), str(legacy_file))


@pytest.fixture
def write_json():
    def _write(path, data):
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return _write


@pytest.fixture
def client(public_dir):
    with TestClient(create_app(str(public_dir))) as c:
        yield c
