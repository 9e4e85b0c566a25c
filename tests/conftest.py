import os
import sys

# Add the repository root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import sqlite3
import tempfile
from fastapi.testclient import TestClient

from zodgen.main import app
from zodgen.core.metadata import StaticMetadataProvider


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def users_columns():
    return {
        "id": {"type": "integer", "nullable": False, "defaultValue": "nextval('users_id_seq'::regclass)"},
        "name": {"type": "character varying", "nullable": False, "maxLength": 255},
        "email": {"type": "character varying", "nullable": True, "maxLength": 255},
        "is_active": {"type": "boolean", "nullable": False, "defaultValue": "true"},
        "profile": {"type": "jsonb", "nullable": True},
        "tags": {"type": "text[]", "nullable": True},
        "created_at": {"type": "timestamp with time zone", "nullable": False, "defaultValue": "now()"},
    }


@pytest.fixture
def provider(users_columns):
    return StaticMetadataProvider({"users": users_columns})


@pytest.fixture
def temp_sqlite_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    try:
        conn = sqlite3.connect(path)
        cur = conn.cursor()
        cur.execute(
            "CREATE TABLE users ("
            "id INTEGER PRIMARY KEY, "
            "name VARCHAR(120) NOT NULL, "
            "email TEXT, "
            "status VARCHAR(20) DEFAULT 'active'"
            ");"
        )
        conn.commit()
        conn.close()
        yield path
    finally:
        os.close(fd)
        os.remove(path)
