"""Integration tests for API endpoints"""

import pytest
from pathlib import Path
from unittest.mock import patch
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from creditsea_gateway.domain.exceptions import StoreError


def _upload(client: TestClient, content, filename: str = "report.xml", content_type: str = "text/xml"):
    return client.post("/api/upload", files={"xmlFile": (filename, content, content_type)})


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "creditsea_reports_deleted_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/api/health")
    assert len(response.headers["X-Request-ID"]) == 32


def test_upload_report(client: TestClient, sample_report_xml: str, staging_dir: Path):
    """Test POST /api/upload stores the extracted report"""
    response = _upload(client, sample_report_xml, filename="cibil.xml")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert len(body["reportId"]) == 24

    data = body["data"]
    assert data["id"] == body["reportId"]
    assert data["fileName"] == "cibil.xml"
    assert data["basicDetails"] == {
        "name": "API Test User",
        "mobilePhone": "1234567890",
        "pan": "TEST12345A",
        "creditScore": 720,
    }
    assert data["reportSummary"]["totalAccounts"] == 1
    assert data["reportSummary"]["activeAccounts"] == 1
    assert data["reportSummary"]["currentBalanceAmount"] == 25000
    assert data["reportSummary"]["last7DaysEnquiries"] is None
    assert data["creditAccounts"] == [
        {
            "type": "Credit Card",
            "bank": "Test Bank",
            "accountNumber": "TEST123",
            "address": None,
            "status": "Active",
            "currentBalance": 25000,
            "amountOverdue": 0,
        }
    ]
    assert data["uploadedAt"] is not None
    assert data["createdAt"] is not None

    # Staging file never outlives the request
    assert list(staging_dir.iterdir()) == []


def test_upload_accepts_xml_content_type_without_extension(client: TestClient, sample_report_xml: str):
    response = _upload(client, sample_report_xml, filename="report", content_type="application/xml")
    assert response.status_code == 201


def test_upload_rejects_non_xml(client: TestClient, staging_dir: Path):
    """Test .txt files are rejected and nothing is stored"""
    response = _upload(client, b"This is a text file", filename="test.txt", content_type="text/plain")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Only XML files are allowed!"}
    assert client.get("/api/reports").json()["count"] == 0
    assert list(staging_dir.iterdir()) == []


def test_upload_without_file(client: TestClient):
    """Test missing file returns 400 with message"""
    response = client.post("/api/upload")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "No file uploaded" in body["message"]


def test_upload_oversized_file(client: TestClient, staging_dir: Path):
    """Test uploads over the size ceiling are rejected"""
    # Test staging area caps uploads at 1 MiB
    oversized = b"<CreditReport>" + b" " * (1024 * 1024) + b"</CreditReport>"
    response = _upload(client, oversized)

    assert response.status_code == 400
    assert "byte limit" in response.json()["message"]
    assert client.get("/api/reports").json()["count"] == 0
    assert list(staging_dir.iterdir()) == []


def test_upload_malformed_xml(client: TestClient, staging_dir: Path):
    """Test parse failures surface as 500 with the parser's message"""
    response = _upload(client, b"<CreditReport><Applicant></CreditReport>")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("Malformed XML")
    assert client.get("/api/reports").json()["count"] == 0
    assert list(staging_dir.iterdir()) == []


@patch("creditsea_gateway.infrastructure.database.repositories.ReportRepository.create")
def test_upload_store_failure(mock_create, client: TestClient, sample_report_xml: str, staging_dir: Path):
    """Test store failures surface as 500 and still clean up"""
    mock_create.side_effect = StoreError("database unavailable")

    response = _upload(client, sample_report_xml)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to store credit report"}
    assert list(staging_dir.iterdir()) == []


def _ingested(outcome: str) -> float:
    return REGISTRY.get_sample_value("creditsea_reports_ingested_total", {"outcome": outcome}) or 0.0


@patch("creditsea_gateway.api.routes.upload.extract")
def test_upload_unexpected_failure_is_counted(mock_extract, client: TestClient, sample_report_xml: str):
    """Test unexpected failures surface as 500 and are recorded as an error outcome"""
    mock_extract.side_effect = RuntimeError("boom")
    before = _ingested("error")

    response = _upload(client, sample_report_xml)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
    assert _ingested("error") == before + 1


def test_upload_exponent_amounts_and_score(client: TestClient, sample_report_xml: str):
    """Test exponent-notation numbers do not fail a well-formed upload"""
    markup = sample_report_xml.replace("<CurrentBalance>25000</CurrentBalance>", "<CurrentBalance>1e5000</CurrentBalance>")
    markup = markup.replace("<Value>720</Value>", "<Value>1e5000</Value>")

    response = _upload(client, markup)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["basicDetails"]["creditScore"] is None
    assert data["creditAccounts"][0]["currentBalance"] == 0


def test_upload_high_precision_amount(client: TestClient, sample_report_xml: str):
    """Test high-precision amounts are stored exactly and rendered as numbers"""
    markup = sample_report_xml.replace(
        "<CurrentBalance>25000</CurrentBalance>", "<CurrentBalance>12345678901234567.89</CurrentBalance>"
    )

    response = _upload(client, markup)

    assert response.status_code == 201
    data = response.json()["data"]
    assert isinstance(data["creditAccounts"][0]["currentBalance"], float)
    assert data["creditAccounts"][0]["currentBalance"] == pytest.approx(12345678901234567.89)


def test_list_reports_newest_first(client: TestClient, sample_report_xml: str):
    """Test GET /api/reports returns summaries, newest upload first"""
    first = _upload(client, sample_report_xml, filename="first.xml").json()["reportId"]
    second = _upload(client, sample_report_xml, filename="second.xml").json()["reportId"]

    response = client.get("/api/reports")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [item["id"] for item in body["data"]] == [second, first]
    assert set(body["data"][0]) == {"id", "name", "creditScore", "fileName", "uploadedAt"}
    assert body["data"][0]["name"] == "API Test User"
    assert body["data"][0]["creditScore"] == 720
    assert body["data"][0]["fileName"] == "second.xml"


def test_list_reports_empty(client: TestClient):
    body = client.get("/api/reports").json()
    assert body == {"success": True, "count": 0, "data": []}


def test_get_report(client: TestClient, sample_report_xml: str):
    """Test GET /api/reports/{id} returns the full record"""
    report_id = _upload(client, sample_report_xml).json()["reportId"]

    response = client.get(f"/api/reports/{report_id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == report_id
    assert data["basicDetails"]["name"] == "API Test User"
    assert len(data["creditAccounts"]) == 1


def test_get_report_not_found(client: TestClient):
    """Test GET /api/reports/{id} with unknown ID"""
    response = client.get(f"/api/reports/{'0' * 24}")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Credit report not found"}


@pytest.mark.parametrize("bad_id", ["123", "not-a-report-id", "ZZZZZZZZZZZZZZZZZZZZZZZZ"])
def test_malformed_report_id(client: TestClient, bad_id: str):
    """Test malformed IDs are a bad request, never an internal error"""
    assert client.get(f"/api/reports/{bad_id}").status_code == 400
    assert client.delete(f"/api/reports/{bad_id}").status_code == 400


def test_delete_report(client: TestClient, sample_report_xml: str):
    """Test DELETE /api/reports/{id}; a second delete is a 404"""
    report_id = _upload(client, sample_report_xml).json()["reportId"]

    response = client.delete(f"/api/reports/{report_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Credit report deleted successfully"}

    assert client.get(f"/api/reports/{report_id}").status_code == 404
    assert client.delete(f"/api/reports/{report_id}").status_code == 404
    assert client.get("/api/reports").json()["count"] == 0
