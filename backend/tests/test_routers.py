"""HTTP tests for the API routers, against the in-memory SQL store and a mocked LLM."""

from __future__ import annotations

import io
import os
import sys
from unittest.mock import AsyncMock, patch

import pandas as pd
import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from crm.config import settings
from crm.dependencies import get_store
from crm.llm.factory import get_llm_provider
from crm.main import app
from crm.services.workspace_service import close_all_workspaces
from crm.utils.exceptions import StoreUnavailableError

API = settings.api_prefix


@pytest.fixture
def client(store, llm):
    close_all_workspaces()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_llm_provider] = lambda: llm
    yield TestClient(app)
    app.dependency_overrides.clear()
    close_all_workspaces()


def _create_property(client: TestClient, user: str = "agent-1", **fields) -> dict:
    headers = {"X-User-Id": user}
    client.patch(f"{API}/properties/draft", json=fields, headers=headers)
    response = client.post(f"{API}/properties/draft/submit", headers=headers)
    assert response.status_code == 200
    return response.json()


# ── Health and auth ────────────────────────────────────────────────────────


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["store_backend"] == settings.store_backend


def test_anonymous_session_when_allowed(client):
    response = client.get(f"{API}/state")
    assert response.status_code == 200
    assert response.json()["user_id"] == settings.anonymous_user_id


def test_missing_user_rejected_when_anonymous_disabled(client):
    with patch.object(settings, "allow_anonymous", False):
        response = client.get(f"{API}/properties")
    assert response.status_code == 401


def test_store_unavailable(llm):
    close_all_workspaces()
    app.dependency_overrides[get_llm_provider] = lambda: llm
    try:
        with patch(
            "crm.dependencies.get_document_store",
            side_effect=StoreUnavailableError("no credentials"),
        ):
            response = TestClient(app).get(f"{API}/properties")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 503


# ── Properties ─────────────────────────────────────────────────────────────


class TestPropertyRoutes:
    def test_submit_and_list_use_document_field_names(self, client):
        created = _create_property(client, title="Nhà phố", tongGiaDat="3 tỷ")
        assert created["maBatDongSan"].startswith("BDS-")

        listed = client.get(f"{API}/properties", headers={"X-User-Id": "agent-1"}).json()
        assert [p["title"] for p in listed] == ["Nhà phố"]
        assert listed[0]["tongGiaDat"] == "3 tỷ"
        assert listed[0]["id"] == created["id"]

    def test_users_are_partitioned(self, client):
        _create_property(client, user="agent-1", title="Của tôi")
        listed = client.get(f"{API}/properties", headers={"X-User-Id": "agent-2"}).json()
        assert listed == []

    def test_analyze(self, client, llm):
        llm.extract_fields = AsyncMock(return_value={"title": "Căn hộ", "price": "2 tỷ"})
        response = client.post(
            f"{API}/properties/draft/analyze", json={"text": "Bán căn hộ 2 tỷ"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Căn hộ"
        assert body["tongGiaDat"] == "2 tỷ"
        assert body["description"] == "Bán căn hộ 2 tỷ"

    def test_analyze_empty_text(self, client, llm):
        response = client.post(f"{API}/properties/draft/analyze", json={"text": "  "})
        assert response.status_code == 400
        llm.extract_fields.assert_not_called()

    def test_analyze_extraction_failure(self, client, llm):
        llm.extract_fields = AsyncMock(side_effect=RuntimeError("model overloaded"))
        response = client.post(f"{API}/properties/draft/analyze", json={"text": "x"})
        assert response.status_code == 502

    def test_edit_unknown_property(self, client):
        response = client.post(f"{API}/properties/missing/edit")
        assert response.status_code == 404

    def test_delete(self, client):
        created = _create_property(client, user=settings.anonymous_user_id, title="Xoá")
        response = client.delete(f"{API}/properties/{created['id']}")
        assert response.status_code == 200
        assert client.get(f"{API}/properties").json() == []

    def test_share(self, client):
        created = _create_property(client, title="Căn hộ", location="Quận 2")
        response = client.get(
            f"{API}/properties/{created['id']}/share",
            params={"page_url": "https://crm.example.com"},
            headers={"X-User-Id": "agent-1"},
        )
        assert response.status_code == 200
        assert response.json()["facebook"].startswith("https://www.facebook.com/sharer/")

    def test_export_empty(self, client):
        response = client.get(f"{API}/properties/export")
        assert response.status_code == 400

    def test_export(self, client):
        _create_property(client, user=settings.anonymous_user_id, title="Nhà A")
        response = client.get(f"{API}/properties/export")
        assert response.status_code == 200
        assert settings.export_filename in response.headers["content-disposition"]
        frame = pd.read_excel(io.BytesIO(response.content), dtype=str, keep_default_na=False)
        assert list(frame["title"]) == ["Nhà A"]

    def test_import(self, client):
        buffer = io.BytesIO()
        pd.DataFrame({"Tiêu đề": ["Nhà A", "Nhà B"]}).to_excel(buffer, index=False)
        response = client.post(
            f"{API}/properties/import",
            files={"file": ("nha.xlsx", buffer.getvalue(), "application/octet-stream")},
        )
        assert response.status_code == 200
        assert response.json() == {"imported": 2}
        assert len(client.get(f"{API}/properties").json()) == 2

    def test_import_rejects_other_file_types(self, client):
        response = client.post(
            f"{API}/properties/import",
            files={"file": ("nha.csv", b"a,b\n1,2\n", "text/csv")},
        )
        assert response.status_code == 400


# ── Customers, appointments, search, state ─────────────────────────────────


class TestOtherRoutes:
    def test_customer_requires_name(self, client):
        client.patch(f"{API}/customers/draft", json={"phone": "0909"})
        response = client.post(f"{API}/customers/draft/submit")
        assert response.status_code == 422

    def test_customer_needs_analysis(self, client, llm):
        llm.extract_fields = AsyncMock(return_value={"location": "Gò Vấp"})
        response = client.post(
            f"{API}/customers/draft/analyze-needs", json={"text": "Cần nhà Gò Vấp"}
        )
        assert response.status_code == 200
        assert response.json()["needs"] == "Nhu cầu: Vị trí: Gò Vấp."

    def test_appointment_with_dangling_customer(self, client):
        client.patch(f"{API}/appointments/draft", json={"customerId": "deleted-customer"})
        assert client.post(f"{API}/appointments/draft/submit").status_code == 200

        [view] = client.get(f"{API}/appointments").json()
        assert view["customerName"] == "N/A"
        assert view["propertyTitle"] == "N/A"

    def test_search_and_notification(self, client, llm):
        _create_property(client, user=settings.anonymous_user_id, title="A", bedrooms="4")
        _create_property(client, user=settings.anonymous_user_id, title="B", bedrooms="2")
        llm.extract_fields = AsyncMock(return_value={"minBedrooms": "3"})

        response = client.post(f"{API}/search", json={"query": "từ 3 phòng ngủ"})
        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["A"]

        notification = client.get(f"{API}/notifications/current").json()
        assert "1" in notification["message"]

        state = client.get(f"{API}/state").json()
        assert state["property_count"] == 2
        assert state["filtered_count"] == 1
        assert state["search_query"] == "từ 3 phòng ngủ"

        reset = client.post(f"{API}/search/reset").json()
        assert len(reset) == 2

    def test_search_failure_clears_results(self, client, llm):
        _create_property(client, user=settings.anonymous_user_id, title="A")
        llm.extract_fields = AsyncMock(side_effect=RuntimeError("down"))
        response = client.post(f"{API}/search", json={"query": "căn hộ"})
        assert response.status_code == 502
        assert client.get(f"{API}/properties/filtered").json() == []
