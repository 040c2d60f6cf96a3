"""Tests for the HTTP API."""

from __future__ import annotations

import threading
from typing import Callable, Sequence

import pytest
from fastapi.testclient import TestClient

from prdforge.api.app import create_app
from prdforge.config import Settings
from prdforge.errors import GenerationInProgressError, StorageError
from prdforge.models.feature import Feature, TemplateId
from prdforge.session import PrdSession
from prdforge.storage.memory import MemoryKeyValueStore

from conftest import VERSIONS_KEY, ScriptedService


class _BlockingService(ScriptedService):
    """Holds the generation call open until released."""

    def __init__(self) -> None:
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def generate(self, features: Sequence[Feature], template_id: TemplateId) -> str:
        self.started.set()
        self.release.wait(timeout=5)
        return super().generate(features, template_id)


@pytest.fixture
def service() -> ScriptedService:
    return ScriptedService(content="<h2>Dashboard</h2><p>The dashboard view.</p>")


@pytest.fixture
def client(make_session: Callable[..., PrdSession], service: ScriptedService) -> TestClient:
    app = create_app(Settings(storage_backend="memory"), session=make_session(service))
    return TestClient(app)


def test_health(client: TestClient) -> None:
    """It should report ok."""

    assert client.get("/health").json() == {"status": "ok"}


def test_generate_then_browse_history(client: TestClient) -> None:
    """It should generate, record a version and expose it."""

    resp = client.post(
        "/generate",
        json={"template": "lean", "features": [{"name": "Dashboard", "description": "Wallet analytics"}]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["content"] == "<h2>Dashboard</h2><p>The dashboard view.</p>"
    assert body["saved"] is True
    version_id = body["version"]["id"]

    versions = client.get("/versions").json()
    assert [v["id"] for v in versions] == [version_id]

    full = client.get(f"/versions/{version_id}").json()
    assert full["features"] == [{"id": full["features"][0]["id"], "name": "Dashboard", "description": "Wallet analytics"}]

    assert client.get("/notification").json()["message"] == "PRD generated and saved as a new version!"


def test_generate_with_blank_features_is_422(client: TestClient, service: ScriptedService) -> None:
    """It should reject blank feature lists without calling the service."""

    resp = client.post("/generate", json={"features": [{"name": "  "}]})
    assert resp.status_code == 422
    assert resp.json()["error"]["kind"] == "validation"
    assert service.calls == []


def test_generate_failure_is_502(client: TestClient, service: ScriptedService) -> None:
    """It should return the classified error."""

    service.error = RuntimeError("Error code: 500 upstream")
    resp = client.post("/generate", json={})
    assert resp.status_code == 502
    assert resp.json()["error"]["kind"] == "server_error"
    assert client.get("/versions").json() == []


def test_search_draft(client: TestClient) -> None:
    """It should highlight matches in the draft."""

    client.post("/generate", json={})
    body = client.get("/draft", params={"q": "dashboard"}).json()
    assert body["matches"] == 2
    assert body["html"].count('<mark class="search-highlight">') == 2

    cleared = client.get("/draft", params={"q": ""}).json()
    assert cleared["html"] == "<h2>Dashboard</h2><p>The dashboard view.</p>"

    assert client.get("/draft", params={"theme": "theme-neon"}).status_code == 400


def test_save_load_and_clear(client: TestClient) -> None:
    """It should save drafts, load versions and clear history."""

    assert client.post("/draft/save").status_code == 400

    first = client.post("/generate", json={}).json()["version"]["id"]
    saved = client.post("/draft/save").json()["id"]
    assert saved > first

    assert client.post(f"/versions/{first}/load").status_code == 200
    assert client.post("/versions/1/load").status_code == 404
    assert client.get("/versions/1").status_code == 404

    assert client.delete("/versions").status_code == 204
    assert client.get("/versions").json() == []
    assert client.get("/draft").json()["html"] == ""


def test_features_crud(client: TestClient) -> None:
    """It should add, edit and delete features."""

    created = client.post("/features", json={"name": "Audit Trail"})
    assert created.status_code == 201
    fid = created.json()["id"]

    updated = client.put(f"/features/{fid}", json={"description": "Admin log"}).json()
    assert updated == {"id": fid, "name": "Audit Trail", "description": "Admin log"}

    assert client.delete(f"/features/{fid}").status_code == 204
    assert client.delete(f"/features/{fid}").status_code == 404
    assert all(f["id"] != fid for f in client.get("/features").json())


def test_exports(client: TestClient) -> None:
    """It should download Markdown and PDF exports of the draft."""

    assert client.get("/export/markdown").status_code == 404

    client.post("/generate", json={})
    md = client.get("/export/markdown")
    assert md.status_code == 200
    assert md.headers["content-type"].startswith("text/markdown")
    assert md.text == "## Dashboard\n\nThe dashboard view.\n"

    pdf = client.get("/export/pdf")
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")
    assert "Audityzer-AI-Agent-PRD.pdf" in pdf.headers["content-disposition"]


def test_font_preference(client: TestClient) -> None:
    """It should read and update the font preference."""

    assert client.get("/preferences/font").json() == {"font": "font-inter"}
    assert client.put("/preferences/font", json={"font": "font-roboto"}).json() == {"font": "font-roboto"}
    assert client.put("/preferences/font", json={"font": "font-papyrus"}).status_code == 400


def test_generate_while_busy_keeps_workspace(make_session: Callable[..., PrdSession]) -> None:
    """It should answer 409 without replacing the features of the running request."""

    svc = _BlockingService()
    ws = make_session(svc)
    client = TestClient(create_app(Settings(storage_backend="memory"), session=ws))
    before = client.get("/features").json()

    worker = threading.Thread(target=ws.generate)
    worker.start()
    try:
        assert svc.started.wait(timeout=5)
        resp = client.post("/generate", json={"template": "lean", "features": [{"name": "Replacement"}]})
        assert resp.status_code == 409
        assert client.get("/features").json() == before
        assert ws.template is TemplateId.AGILE
    finally:
        svc.release.set()
        worker.join(timeout=5)

    assert len(client.get("/versions").json()) == 1


def test_generate_lost_race_restores_workspace(
    make_session: Callable[..., PrdSession], monkeypatch: pytest.MonkeyPatch
) -> None:
    """It should put the previous features back when generation is refused after they were applied."""

    ws = make_session()
    client = TestClient(create_app(Settings(storage_backend="memory"), session=ws))
    before = client.get("/features").json()

    def refuse() -> None:
        raise GenerationInProgressError("A PRD generation is already in progress")

    monkeypatch.setattr(ws, "generate", refuse)

    resp = client.post("/generate", json={"template": "lean", "features": [{"name": "Replacement"}]})
    assert resp.status_code == 409
    assert client.get("/features").json() == before
    assert ws.template is TemplateId.AGILE


def test_clear_versions_reports_storage_failure(
    client: TestClient, kv: MemoryKeyValueStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    """It should not answer 204 when the stored log could not be removed."""

    client.post("/generate", json={})

    def refuse(key: str) -> None:
        raise StorageError("disk is read-only")

    monkeypatch.setattr(kv, "remove", refuse)

    resp = client.delete("/versions")
    assert resp.status_code == 503
    assert "disk is read-only" in resp.json()["detail"]
    assert kv.get(VERSIONS_KEY) is not None
