"""HTTP transport for the openFDA drug label endpoint."""

import logging
from typing import Any, Dict, Optional

import requests

from .config import OpenFDAConfig
from .query_builder import ExternalQuery

MAX_ERROR_BODY_LENGTH = 500


class OpenFDAAPIError(Exception):
    """Exception raised when the openFDA API call fails.

    Covers non-success HTTP statuses as well as network failures and timeouts
    (the latter carry no status code).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: Optional[str] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.response_text = response_text


class OpenFDAParseError(OpenFDAAPIError):
    """Exception raised when a successful response body is not valid JSON."""


class OpenFDAClient:
    """Client for the openFDA drug label REST endpoint."""

    def __init__(self, config: OpenFDAConfig):
        self.config = config
        self.base_url = config.base_url
        self.session = requests.Session()
        self.logger = logging.getLogger(__name__)

        self.session.headers.update({'Accept': 'application/json'})

    def build_url(self, query: ExternalQuery) -> str:
        """Serialize a query against the base endpoint."""
        query_string = query.to_query_string()
        if not query_string:
            return self.base_url
        return f"{self.base_url}?{query_string}"

    def fetch(self, query: ExternalQuery) -> Dict[str, Any]:
        """
        Issue a single GET for the query and return the parsed JSON body.

        Args:
            query: Query to send

        Returns:
            Parsed JSON response

        Raises:
            OpenFDAAPIError: On network failure, timeout or non-success status
            OpenFDAParseError: When a success response is not valid JSON
        """
        url = self.build_url(query)
        self.logger.debug(f"GET {self.build_url(query.model_copy(update={'api_key': None}))}")

        try:
            response = self.session.get(url, timeout=self.config.request_timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request failed: {e}")
            raise OpenFDAAPIError(f"openFDA request failed: {e}") from e

        self.logger.debug(f"Response status: {response.status_code}")

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:MAX_ERROR_BODY_LENGTH]
            raise OpenFDAAPIError(
                f"openFDA error: {response.status_code} {response.reason} - {body}",
                status_code=response.status_code,
                status_text=response.reason,
                response_text=body,
            )

        try:
            return response.json()
        except ValueError as e:
            body = (response.text or "")[:MAX_ERROR_BODY_LENGTH]
            raise OpenFDAParseError(
                f"openFDA returned invalid JSON: {e}",
                status_code=response.status_code,
                status_text=response.reason,
                response_text=body,
            ) from e

    def close(self) -> None:
        self.session.close()
