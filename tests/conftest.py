import pytest
from unittest.mock import MagicMock

import orjson

from ga4cli.config import Settings
from ga4cli.models import ReportResponse


def path_row(
    path: str,
    sessions="0",
    total_users="0",
    new_users="0",
    pageviews="0",
    event_count="0",
    duration="0",
    bounce="0",
    engagement="0",
) -> dict:
    """Raw API row for a pagePath report with the eight report metrics"""
    values = [sessions, total_users, new_users, pageviews, event_count, duration, bounce, engagement]
    return {
        "dimensionValues": [{"value": path}],
        "metricValues": [{"value": str(v)} for v in values],
    }


def totals_row(pageviews="0", **metrics) -> dict:
    row = path_row("", pageviews=pageviews, **metrics)
    row["dimensionValues"] = []
    return row


def report_response(rows=None, totals=None) -> ReportResponse:
    data = {"rows": rows or []}
    if totals is not None:
        data["totals"] = [totals]
    return ReportResponse.model_validate(data)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a temporary config directory"""
    monkeypatch.setenv("GA4_CLI_CONFIG_DIR", str(tmp_path / "ga4-cli"))
    return Settings()


@pytest.fixture
def credentials_file(tmp_path):
    path = tmp_path / "service-account.json"
    path.write_bytes(orjson.dumps({
        "type": "service_account",
        "project_id": "test-project",
        "client_email": "reader@test-project.iam.gserviceaccount.com",
    }))
    return path


@pytest.fixture
def fake_credentials():
    """google-auth credentials that already hold a valid token"""
    credentials = MagicMock()
    credentials.valid = True
    credentials.token = "test-token"
    return credentials
