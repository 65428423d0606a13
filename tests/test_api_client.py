"""Tests for openFDA API client."""

import pytest
import requests
from unittest.mock import Mock, patch

from openfda_mcp.api_client import (
    MAX_ERROR_BODY_LENGTH,
    OpenFDAAPIError,
    OpenFDAClient,
    OpenFDAParseError,
)
from openfda_mcp.async_api_client import AsyncOpenFDAClient
from openfda_mcp.config import OpenFDAConfig
from openfda_mcp.query_builder import ExternalQuery


class TestOpenFDAClient:
    """Test cases for OpenFDAClient."""

    @pytest.fixture
    def config(self):
        """Create test configuration."""
        return OpenFDAConfig(request_timeout=15)

    @pytest.fixture
    def client(self, config):
        """Create test client."""
        return OpenFDAClient(config)

    def test_client_initialization(self, client, config):
        """Test client initialization."""
        assert client.config == config
        assert client.base_url == "https://api.fda.gov/drug/label.json"
        assert client.session.headers["Accept"] == "application/json"

    def test_build_url_without_params(self, client):
        assert client.build_url(ExternalQuery()) == "https://api.fda.gov/drug/label.json"

    def test_build_url(self, client):
        url = client.build_url(ExternalQuery(search="set_id:abc", limit=1))

        assert url == "https://api.fda.gov/drug/label.json?search=set_id:abc&limit=1"

    @patch("requests.Session.get")
    def test_fetch_success(self, mock_get, client, make_response, sample_label_response):
        """Test a successful fetch returns the parsed body."""
        mock_get.return_value = make_response(json_data=sample_label_response)

        result = client.fetch(ExternalQuery(limit=1))

        assert result == sample_label_response
        mock_get.assert_called_once_with(
            "https://api.fda.gov/drug/label.json?limit=1", timeout=15
        )

    @patch("requests.Session.get")
    def test_fetch_error_status(self, mock_get, client, make_response):
        """Test a non-success status raises with status and body."""
        body = '{"error": {"code": "NOT_FOUND", "message": "No matches found!"}}'
        mock_get.return_value = make_response(404, text=body, reason="Not Found")

        with pytest.raises(OpenFDAAPIError) as exc_info:
            client.fetch(ExternalQuery(search="set_id:none", limit=1))

        error = exc_info.value
        assert str(error) == f"openFDA error: 404 Not Found - {body}"
        assert error.status_code == 404
        assert error.status_text == "Not Found"
        assert error.response_text == body

    @patch("requests.Session.get")
    def test_error_body_is_capped(self, mock_get, client, make_response):
        mock_get.return_value = make_response(500, text="x" * 2000, reason="Internal Server Error")

        with pytest.raises(OpenFDAAPIError) as exc_info:
            client.fetch(ExternalQuery(limit=1))

        assert len(exc_info.value.response_text) == MAX_ERROR_BODY_LENGTH

    @patch("requests.Session.get")
    @pytest.mark.parametrize("exception", [
        requests.exceptions.ConnectionError("connection refused"),
        requests.exceptions.Timeout("read timed out"),
    ])
    def test_network_failures(self, mock_get, exception, client):
        """Test transport failures surface as API errors without a status."""
        mock_get.side_effect = exception

        with pytest.raises(OpenFDAAPIError) as exc_info:
            client.fetch(ExternalQuery(limit=1))

        assert exc_info.value.status_code is None
        assert "openFDA request failed" in str(exc_info.value)

    @patch("requests.Session.get")
    def test_invalid_json(self, mock_get, client, make_response):
        """Test a success status with a non-JSON body is a parse error."""
        mock_get.return_value = make_response(
            200, json_data=ValueError("Expecting value"), text="<html>"
        )

        with pytest.raises(OpenFDAParseError) as exc_info:
            client.fetch(ExternalQuery(limit=1))

        assert isinstance(exc_info.value, OpenFDAAPIError)
        assert exc_info.value.response_text == "<html>"

    def test_close(self, client):
        client.session = Mock()

        client.close()

        client.session.close.assert_called_once()


class TestAsyncOpenFDAClient:
    """Test cases for the async wrapper."""

    @pytest.mark.asyncio
    async def test_fetch_runs_sync_client(self):
        sync_client = Mock()
        sync_client.fetch.return_value = {"results": []}
        query = ExternalQuery(limit=1)

        result = await AsyncOpenFDAClient(sync_client).fetch(query)

        assert result == {"results": []}
        sync_client.fetch.assert_called_once_with(query)

    @pytest.mark.asyncio
    async def test_fetch_propagates_errors(self):
        sync_client = Mock()
        sync_client.fetch.side_effect = OpenFDAAPIError("openFDA error: 500 Internal Server Error - boom")

        with pytest.raises(OpenFDAAPIError, match="500"):
            await AsyncOpenFDAClient(sync_client).fetch(ExternalQuery(limit=1))

    def test_close(self):
        sync_client = Mock()

        AsyncOpenFDAClient(sync_client).close()

        sync_client.close.assert_called_once()
