"""HTTP API tests using FastAPI's TestClient."""

from __future__ import annotations

import inspect
import json

from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from lunatrack.services.store import JsonStore


class TestHealth:
    def test_health_at_root_and_api(self, client: TestClient) -> None:
        for path in ("/health", "/api/health"):
            resp = client.get(path)
            assert resp.status_code == 200
            assert resp.json()["ok"] is True


class TestRouting:
    def test_file_backed_handlers_are_sync(self, client: TestClient) -> None:
        routes = [
            r for r in client.app.routes
            if isinstance(r, APIRoute) and not r.path.endswith("/health")
        ]
        assert routes
        for route in routes:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path


class TestEntries:
    def test_empty_stats(self, client: TestClient) -> None:
        resp = client.get("/api/entries")
        assert resp.status_code == 200
        assert resp.json() == {
            "entries": [],
            "averageCycleLength": 28,
            "predictions": [],
            "last": None,
            "daysSinceLast": None,
            "nextDate": None,
            "daysUntilNext": None,
            "cycles": [],
        }

    def test_add_then_stats(self, client: TestClient) -> None:
        for d in ("2024-01-29", "2024-01-01"):
            resp = client.post("/api/entries", json={"date": d})
            assert resp.status_code == 201
        assert resp.json() == {"entries": ["2024-01-01", "2024-01-29"]}

        body = client.get("/api/entries").json()
        assert body["averageCycleLength"] == 28
        assert body["last"] == "2024-01-29"
        assert body["nextDate"] == "2024-02-26"
        assert body["daysSinceLast"] == 32
        assert body["daysUntilNext"] == -4
        assert len(body["predictions"]) == 6
        assert body["cycles"][0] == {
            "start": "2024-02-26",
            "ovulationDate": "2024-03-11",
            "fertileWindow": {"start": "2024-03-07", "end": "2024-03-12"},
        }

    def test_ovulation_toggle_affects_stats(self, client: TestClient) -> None:
        client.post("/api/entries", json={"date": "2024-02-01"})
        resp = client.put("/api/enable-ovulation", json={"enableOvulation": False})
        assert resp.json() == {"enableOvulation": False}

        cycle = client.get("/api/entries").json()["cycles"][0]
        assert cycle["ovulationDate"] is None
        assert cycle["fertileWindow"] is None

    def test_default_length_used_without_history(self, client: TestClient) -> None:
        client.put("/api/settings", json={"defaultCycleLength": 30})
        client.post("/api/entries", json={"date": "2024-02-01"})
        body = client.get("/api/entries").json()
        assert body["averageCycleLength"] == 30
        assert body["nextDate"] == "2024-03-02"
        assert body["daysUntilNext"] == 1

    def test_invalid_post_body(self, client: TestClient) -> None:
        for bad in ("2024-02-30", "2024-2-1", "20240201"):
            resp = client.post("/api/entries", json={"date": bad})
            assert resp.status_code == 422

    def test_delete_entry(self, client: TestClient) -> None:
        client.post("/api/entries", json={"date": "2024-01-01"})
        client.post("/api/entries", json={"date": "2024-02-01"})
        resp = client.delete("/api/entries/2024-01-01")
        assert resp.status_code == 200
        assert resp.json() == {"entries": ["2024-02-01"]}

    def test_delete_invalid_date_is_400(self, client: TestClient) -> None:
        resp = client.delete("/api/entries/not-a-date")
        assert resp.status_code == 400
        assert "not-a-date" in resp.json()["detail"]

    def test_responses_not_cached(self, client: TestClient) -> None:
        assert client.get("/api/entries").headers["cache-control"] == "no-store"


class TestSettings:
    def test_get_defaults(self, client: TestClient) -> None:
        body = client.get("/api/settings").json()
        assert body["defaultCycleLength"] == 28
        assert body["pinEnabled"] is False
        assert body["SSL"] is None

    def test_put_merges_fields(self, client: TestClient) -> None:
        client.put("/api/enable-ovulation", json={"enableOvulation": False})
        resp = client.put("/api/settings", json={"pin": "0000", "pinEnabled": True})
        assert resp.status_code == 200
        body = resp.json()
        assert body["pin"] == "0000"
        assert body["enableOvulation"] is False

    def test_put_rejects_out_of_range_length(self, client: TestClient) -> None:
        for length in (14, 121):
            resp = client.put("/api/settings", json={"defaultCycleLength": length})
            assert resp.status_code == 422

    def test_put_empty_body(self, client: TestClient) -> None:
        assert client.put("/api/settings", json={}).status_code == 400

    def test_put_null_for_required_field_is_422(self, client: TestClient) -> None:
        for field in ("pin", "defaultCycleLength", "dataFile", "enableOvulation"):
            resp = client.put("/api/settings", json={field: None})
            assert resp.status_code == 422, field
        assert client.get("/api/settings").json()["defaultCycleLength"] == 28

    def test_put_null_clears_optional_field(self, client: TestClient) -> None:
        client.put("/api/settings", json={"apiPort": 4000})
        resp = client.put("/api/settings", json={"apiPort": None})
        assert resp.status_code == 200
        assert resp.json()["apiPort"] is None

    def test_put_rejects_unsafe_data_file(self, client: TestClient) -> None:
        for name in ("../escaped.json", "settings.json", "inspiration.json", "a\\b.json"):
            resp = client.put("/api/settings", json={"dataFile": name})
            assert resp.status_code == 422, name
        assert client.get("/api/settings").json()["dataFile"] == "cycles.json"

    def test_toggle_requires_boolean(self, client: TestClient) -> None:
        resp = client.put("/api/enable-ovulation", json={"enableOvulation": "yes"})
        assert resp.status_code == 422

    def test_file_protected_roundtrip(self, client: TestClient) -> None:
        assert client.get("/api/file-protected").json() == {"fileProtected": False}
        client.put("/api/file-protected", json={"fileProtected": True})
        assert client.get("/api/file-protected").json() == {"fileProtected": True}

    def test_ports(self, client: TestClient) -> None:
        assert client.get("/api/ports").json() == {"httpPort": 5173, "httpsPort": 7379}
        resp = client.put("/api/ports", json={"httpPort": 8080, "httpsPort": 8443})
        assert resp.json() == {"httpPort": 8080, "httpsPort": 8443}
        assert client.get("/api/ports").json()["httpsPort"] == 8443
        assert client.put("/api/ports", json={"httpPort": "80"}).status_code == 422

    def test_ssl(self, client: TestClient) -> None:
        assert client.get("/api/ssl").json() == {"SSL": None}
        resp = client.put("/api/ssl", json={"certFile": "cert.pem", "keyFile": "key.pem"})
        assert resp.json() == {"SSL": {"certFile": "cert.pem", "keyFile": "key.pem"}}
        assert client.get("/api/ssl").json()["SSL"]["keyFile"] == "key.pem"


class TestBackup:
    def test_export_marks_protected(self, client: TestClient) -> None:
        client.post("/api/entries", json={"date": "2024-01-01"})
        assert client.get("/api/file-protected").json()["fileProtected"] is False

        resp = client.get("/api/backup/export")
        assert resp.status_code == 200
        body = resp.json()
        assert body["entries"] == ["2024-01-01"]
        assert body["settings"]["fileProtected"] is True
        assert "exportedAt" in body
        assert client.get("/api/file-protected").json()["fileProtected"] is True

    def test_import_replaces_entries(self, client: TestClient) -> None:
        client.post("/api/entries", json={"date": "2023-06-01"})
        exported = client.get("/api/backup/export").json()
        exported["entries"] = ["2024-01-29", "2024-01-01"]

        resp = client.post("/api/backup/import", json=exported)
        assert resp.status_code == 200
        assert resp.json() == {"entries": ["2024-01-01", "2024-01-29"]}
        assert client.get("/api/file-protected").json()["fileProtected"] is False

    def test_import_rejects_invalid_dates(self, client: TestClient) -> None:
        resp = client.post("/api/backup/import", json={"entries": ["2024-02-30"]})
        assert resp.status_code == 422


class TestInspiration:
    def test_message_lookup(self, client: TestClient, store: JsonStore) -> None:
        (store.data_dir / "inspiration.json").write_text(
            json.dumps([{"id": 3, "text": "Be gentle with yourself."}])
        )
        assert client.get("/api/inspiration/3").json() == {
            "id": 3,
            "message": "Be gentle with yourself.",
        }
        assert client.get("/api/inspiration/4").status_code == 404

    def test_non_string_text_is_404(self, client: TestClient, store: JsonStore) -> None:
        (store.data_dir / "inspiration.json").write_text(
            json.dumps([{"id": 1, "text": 42}, {"id": 2, "text": None}])
        )
        assert client.get("/api/inspiration/1").status_code == 404
        assert client.get("/api/inspiration/2").status_code == 404

    def test_invalid_id(self, client: TestClient) -> None:
        assert client.get("/api/inspiration/0").status_code == 400
        assert client.get("/api/inspiration/abc").status_code == 400

    def test_missing_file_is_500(self, client: TestClient) -> None:
        resp = client.get("/api/inspiration/1")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Could not load inspiration messages"}
