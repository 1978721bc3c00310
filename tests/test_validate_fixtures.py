"""Tests for the fixture validation orchestration and CLI."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import yaml

from oura_toolkit import validate_fixtures
from oura_toolkit.drift.fixture_store import FixtureStore
from oura_toolkit.drift.report_generator import ValidationOutcome
from oura_toolkit.utils.errors import OuraApiError
from oura_toolkit.validate_fixtures import (
    DEFAULT_CONFIG,
    EndpointConfig,
    get_access_token,
    get_date_range,
    get_endpoints,
    load_config,
    run_validation,
    validate_endpoint,
)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def store(tmp_path):
    """Create a fixture store in a temporary directory."""
    return FixtureStore(tmp_path / "fixtures")


@pytest.fixture
def mock_client():
    """Create a mock Oura client."""
    client = MagicMock()
    client.fetch = AsyncMock()
    return client


SLEEP = EndpointConfig(endpoint="daily_sleep", fixture="oura-daily-sleep-response.json")


# ============================================================================
# Configuration
# ============================================================================


def test_load_config_defaults_when_missing(tmp_path):
    """Test that a missing file yields a copy of the defaults."""
    config = load_config(tmp_path / "missing.yaml")

    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    assert len(config["endpoints"]) == 14


def test_load_config_deep_merges(tmp_path):
    """Test that user settings override defaults without dropping siblings."""
    path = tmp_path / "fixtures.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "fixtures": {
                    "api": {"timeout": 5},
                    "endpoints": [{"endpoint": "tag", "fixture": "tags.json"}],
                },
            },
        ),
    )

    config = load_config(path)

    assert config["api"]["timeout"] == 5
    assert config["api"]["base_url"] == DEFAULT_CONFIG["api"]["base_url"]
    assert config["endpoints"] == [{"endpoint": "tag", "fixture": "tags.json"}]
    assert DEFAULT_CONFIG["api"]["timeout"] == 30


def test_shipped_config_matches_defaults():
    """Test that config/fixtures.yaml lists the default endpoints."""
    path = Path(__file__).parent.parent / "config" / "fixtures.yaml"
    config = load_config(path)

    assert get_endpoints(config) == get_endpoints(DEFAULT_CONFIG)


def test_get_endpoints_filter():
    """Test endpoint filtering by name."""
    endpoints = get_endpoints(DEFAULT_CONFIG, ["personal_info", "sleep"])

    assert [e.endpoint for e in endpoints] == ["sleep", "personal_info"]
    assert endpoints[1].params("2024-01-01", "2024-01-02") is None
    assert endpoints[0].params("2024-01-01", "2024-01-02") == {
        "start_date": "2024-01-01",
        "end_date": "2024-01-02",
    }


def test_get_date_range():
    """Test the look-back window calculation."""
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    assert get_date_range(DEFAULT_CONFIG, now=now) == ("2023-01-15", "2024-01-15")
    assert get_date_range({"date_range": {"days_back": 7}}, now=now) == (
        "2024-01-08",
        "2024-01-15",
    )


def test_get_access_token(monkeypatch):
    """Test reading the token from the configured variable."""
    monkeypatch.setenv("MY_TOKEN", "abc")
    monkeypatch.delenv("OURA_ACCESS_TOKEN", raising=False)

    assert get_access_token({"authentication": {"env_var": "MY_TOKEN"}}) == "abc"
    assert get_access_token(DEFAULT_CONFIG) is None


# ============================================================================
# Endpoint validation
# ============================================================================


class TestValidateEndpoint:
    """Tests for single endpoint validation."""

    @pytest.mark.asyncio
    async def test_matching_structure(self, mock_client, store):
        store.save(SLEEP.fixture, {"data": [{"day": "2024-01-01", "score": None}]})
        mock_client.fetch.return_value = {"data": [{"day": "2024-01-15", "score": 80}]}

        result = await validate_endpoint(mock_client, store, SLEEP, "2023-01-15", "2024-01-15")

        assert result.outcome is ValidationOutcome.MATCHED
        assert result.diff is not None and result.diff.matches
        mock_client.fetch.assert_awaited_once_with(
            "daily_sleep",
            {"start_date": "2023-01-15", "end_date": "2024-01-15"},
        )

    @pytest.mark.asyncio
    async def test_drifted_structure(self, mock_client, store):
        store.save(SLEEP.fixture, {"data": [{"day": "2024-01-01", "score": 80}]})
        mock_client.fetch.return_value = {"data": [{"day": "2024-01-15", "score": "80"}]}

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.DRIFTED
        assert result.diff.lines() == ["~ data[].score: fixture=number, actual=string"]

    @pytest.mark.asyncio
    async def test_missing_fixture_is_created(self, mock_client, store):
        actual = {"data": [], "next_token": None}
        mock_client.fetch.return_value = actual

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.CREATED
        assert result.diff is None
        written = store.path_for(SLEEP.fixture).read_text()
        assert json.loads(written) == actual
        assert written == json.dumps(actual, indent=2) + "\n"

    @pytest.mark.asyncio
    async def test_unparsable_fixture_is_replaced(self, mock_client, store):
        store.fixtures_dir.mkdir(parents=True)
        store.path_for(SLEEP.fixture).write_text("{oops")
        mock_client.fetch.return_value = {"data": []}

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.CREATED
        assert store.load(SLEEP.fixture) == {"data": []}

    @pytest.mark.asyncio
    async def test_null_fixture_is_compared_not_replaced(self, mock_client, store):
        store.fixtures_dir.mkdir(parents=True)
        store.path_for(SLEEP.fixture).write_text("null\n")
        mock_client.fetch.return_value = {"a": 1}

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.DRIFTED
        assert result.diff.lines() == [
            "+ a: number (new field in API)",
        ]
        assert store.path_for(SLEEP.fixture).read_text() == "null\n"

    @pytest.mark.asyncio
    async def test_api_error_is_reported(self, mock_client, store):
        mock_client.fetch.side_effect = OuraApiError(429, "Too Many Requests", "")

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.ERROR
        assert "Rate limited" in result.error
        assert not store.exists(SLEEP.fixture)

    @pytest.mark.asyncio
    async def test_network_error_is_reported(self, mock_client, store):
        mock_client.fetch.side_effect = httpx.ConnectError("boom")

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.ERROR
        assert result.error.startswith("Network error")

    @pytest.mark.asyncio
    async def test_non_json_response_is_reported(self, mock_client, store):
        store.save(SLEEP.fixture, {"a": 1})
        mock_client.fetch.return_value = {"a": object()}

        result = await validate_endpoint(mock_client, store, SLEEP, "a", "b")

        assert result.outcome is ValidationOutcome.ERROR
        assert "Unsupported JSON value" in result.error


@pytest.mark.asyncio
async def test_run_validation_continues_after_failures(mock_client, store):
    """Test that one failing endpoint does not stop the others."""
    endpoints = [
        EndpointConfig("heartrate", "hr.json"),
        EndpointConfig("personal_info", "info.json", dated=False),
        EndpointConfig("tag", "tags.json"),
    ]
    store.save("tags.json", {"data": [{"tags": ["x"]}]})
    mock_client.fetch.side_effect = [
        OuraApiError(503, "Service Unavailable", ""),
        {"age": 34},
        {"data": [{"tags": []}], "next_token": None},
    ]

    session = await run_validation(mock_client, store, endpoints, "2023-01-15", "2024-01-15")

    assert [r.outcome for r in session.results] == [
        ValidationOutcome.ERROR,
        ValidationOutcome.CREATED,
        ValidationOutcome.DRIFTED,
    ]
    assert session.results[2].diff.lines() == [
        "+ next_token: null (new field in API)",
        "- data[].tags[]: string (missing in API response)",
    ]
    assert session.completed_at is not None
    assert mock_client.fetch.await_args_list[1].args == ("personal_info", None)


# ============================================================================
# CLI
# ============================================================================


class TestMain:
    """Tests for the command-line entry point."""

    def test_dry_run_needs_no_token(self, monkeypatch, tmp_path):
        monkeypatch.delenv("OURA_ACCESS_TOKEN", raising=False)

        assert validate_fixtures.main(["--dry-run", "--fixtures-dir", str(tmp_path)]) == 0

    def test_missing_token_fails(self, monkeypatch, tmp_path):
        monkeypatch.delenv("OURA_ACCESS_TOKEN", raising=False)

        assert validate_fixtures.main(["--fixtures-dir", str(tmp_path)]) == 1

    def _run_with_handler(self, monkeypatch, tmp_path, handler, extra_args):
        monkeypatch.setenv("OURA_ACCESS_TOKEN", "token")
        real_async_client = httpx.AsyncClient

        def fake_async_client(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_async_client(*args, **kwargs)

        with patch("oura_toolkit.client.httpx.AsyncClient", side_effect=fake_async_client):
            return validate_fixtures.main(
                ["--fixtures-dir", str(tmp_path), "--endpoint", "tag", *extra_args],
            )

    def test_first_run_creates_fixture(self, monkeypatch, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": [{"day": "2024-01-15"}]})

        assert self._run_with_handler(monkeypatch, tmp_path, handler, ["--strict"]) == 0
        assert json.loads((tmp_path / "oura-tags-response.json").read_text()) == {
            "data": [{"day": "2024-01-15"}],
        }

    def test_strict_fails_on_drift(self, monkeypatch, tmp_path):
        (tmp_path / "oura-tags-response.json").write_text(json.dumps({"data": [{"day": "x"}]}))

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": [{"day": 1}]})

        assert self._run_with_handler(monkeypatch, tmp_path, handler, []) == 0
        assert self._run_with_handler(monkeypatch, tmp_path, handler, ["--strict"]) == 1

    def test_strict_fails_on_errors(self, monkeypatch, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="")

        assert self._run_with_handler(monkeypatch, tmp_path, handler, ["--strict"]) == 1
        assert not (tmp_path / "oura-tags-response.json").exists()
