from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def make_visit():
    created = datetime(2024, 5, 1, 12, 0, 0)

    def _make(doc_id: Any = "visit-1", **overrides: Any) -> dict:
        doc = {
            "_id": doc_id,
            "user_id": "user-1",
            "place_name": "Harbour Cafe",
            "created_at": created,
            "updated_at": created,
        }
        doc.update(overrides)
        return doc

    return _make


@pytest.fixture
def nominatim_payload() -> dict[str, Any]:
    return {
        "place_id": 1234,
        "address": {
            "county": "Auckland",
            "state": "Auckland Region",
            "country": "New Zealand",
            "country_code": "nz",
        },
    }
