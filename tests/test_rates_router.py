"""
HTTP binding of the rate store (status codes and payload shape).
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the rates_api package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rates_api.app import create_app
from rates_api.core import config as core_config


@pytest.fixture()
def client(tmp_path, monkeypatch):
    (tmp_path / "seed.json").write_text(
        json.dumps([{"id": "r1", "title": "Standard", "rate": 100}]), encoding="utf-8"
    )
    monkeypatch.setenv("RATES_DATA_PREFIX", str(tmp_path))
    monkeypatch.setenv("RATES_STORAGE_BACKEND", "file")
    core_config.get_settings.cache_clear()
    with TestClient(create_app()) as test_client:
        yield test_client
    core_config.get_settings.cache_clear()


def test_list_and_count(client):
    resp = client.get("/rates")
    assert resp.status_code == 200
    body = resp.json()
    assert [r["id"] for r in body] == ["r1"]
    assert body[0]["currency"] == "CHF"
    assert body[0]["type"] == "STANDARD"
    assert client.get("/rates/count").json() == {"count": 1}


def test_create_read_update_delete(client):
    resp = client.post("/rates", json={"title": "Rush", "rate": 150}, headers={"X-User": "alice"})
    assert resp.status_code == 201
    created = resp.json()
    assert created["createdBy"] == "alice"

    assert client.get(f"/rates/{created['id']}").json() == created

    resp = client.put(f"/rates/{created['id']}", json={"title": "Rush hour", "rate": 160})
    assert resp.status_code == 200
    assert resp.json()["rate"] == 160
    assert resp.json()["createdBy"] == "alice"

    assert client.delete(f"/rates/{created['id']}").status_code == 204
    assert client.get(f"/rates/{created['id']}").status_code == 404
    assert client.get("/rates/count").json() == {"count": 1}


def test_error_mapping(client):
    assert client.post("/rates", json={"id": "r1", "title": "Dup", "rate": 1}).status_code == 409
    assert client.post("/rates", json={"title": "", "rate": 1}).status_code == 400
    assert client.post("/rates", json={"title": "Neg", "rate": -1}).status_code == 400
    assert client.get("/rates/missing").status_code == 404
    assert client.put("/rates/missing", json={"title": "X", "rate": 1}).status_code == 404
    assert client.put("/rates/r1", json={"id": "r2", "title": "X", "rate": 1}).status_code == 400
    assert client.delete("/rates/missing").status_code == 404
    assert client.get("/rates", params={"position": -1}).status_code == 400


def test_paging_params(client):
    for title in ("A", "B", "C"):
        client.post("/rates", json={"title": title, "rate": 1})
    resp = client.get("/rates", params={"position": 1, "size": 2})
    assert [r["title"] for r in resp.json()] == ["A", "B"]
    resp = client.get("/rates", params={"queryType": "title", "query": "c"})
    assert [r["title"] for r in resp.json()] == ["C"]


def test_data_file_created_on_startup(client, tmp_path):
    assert (tmp_path / "data.json").exists()
    assert client.get("/health").json()["backend"] == "file"


def test_non_finite_rate_is_rejected_and_store_stays_readable(client, tmp_path):
    resp = client.post(
        "/rates",
        content='{"title": "x", "rate": NaN}',
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code in (400, 422)
    resp = client.get("/rates")
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == ["r1"]
    assert "NaN" not in (tmp_path / "data.json").read_text(encoding="utf-8")
