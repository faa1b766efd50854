"""Sanity HTTP query API client (GROQ over HTTPS)."""
import json
import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from cms_gateway.domain.errors import CMSError, CMSErrorCode
from cms_gateway.infrastructure.clients.error_mapping import (
    error_from_exception,
    error_from_response,
)
from cms_gateway.middleware.monitoring import track_backend_request


class SanityAPIClient:
    """
    Client for the Sanity content lake query endpoint.

    Runs GROQ queries with JSON-encoded parameters and returns the
    ``result`` member of the response.
    """

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_token: Optional[str] = None,
        use_cdn: bool = False,
        api_version: str = "2024-01-01",
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Sanity client.

        Args:
            project_id: Sanity project identifier
            dataset: Dataset name (e.g. "production")
            api_token: Optional read token (required for private datasets)
            use_cdn: Query the API CDN instead of the live API
            api_version: Dated API version
            timeout: Request timeout in seconds
            session: Optional preconfigured session (Dependency Injection)
        """
        self.project_id = project_id
        self.dataset = dataset
        self.api_token = api_token
        self.use_cdn = use_cdn
        self.api_version = api_version.lstrip("v")
        self.timeout = timeout
        self._logger = logging.getLogger(__name__)
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry strategy."""
        session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        session.mount("https://", HTTPAdapter(max_retries=retry_strategy, pool_maxsize=20))
        return session

    @property
    def query_url(self) -> str:
        host = "apicdn.sanity.io" if self.use_cdn else "api.sanity.io"
        return f"https://{self.project_id}.{host}/v{self.api_version}/data/query/{self.dataset}"

    @staticmethod
    def encode_params(query: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """GROQ parameters are sent as ``$name`` query arguments holding JSON values."""
        encoded = {"query": query}
        for name, value in (params or {}).items():
            encoded[f"${name}"] = json.dumps(value)
        return encoded

    def fetch(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GROQ query.

        Args:
            query: GROQ query string
            params: Optional query parameters referenced as ``$name``

        Returns:
            The query ``result`` (list, object or None)

        Raises:
            CMSError: If the request fails or the response is malformed
        """
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"

        started_at = time.monotonic()
        try:
            response = self.session.get(
                self.query_url,
                params=self.encode_params(query, params),
                headers=headers,
                timeout=self.timeout
            )
            if not response.ok:
                error = error_from_response("Sanity", response)
                self._logger.error(
                    f"Sanity query error {response.status_code}: {self._error_description(response)}"
                )
                raise error
            try:
                body = response.json()
            except ValueError as json_error:
                raise CMSError(
                    f"Expected JSON response from Sanity but got: {response.text[:200]}",
                    CMSErrorCode.INVALID_RESPONSE,
                    json_error
                ) from json_error
            if not isinstance(body, dict) or "result" not in body:
                raise CMSError("Sanity response has no result member", CMSErrorCode.INVALID_RESPONSE)
        except CMSError as e:
            track_backend_request("sanity", e.code.value, started_at)
            raise
        except requests.exceptions.RequestException as e:
            self._logger.error(f"Sanity query failed: {e}")
            error = error_from_exception("Sanity", e)
            track_backend_request("sanity", error.code.value, started_at)
            raise error from e

        track_backend_request("sanity", "success", started_at)
        self._logger.debug(f"Sanity query took {body.get('ms', '?')}ms")
        return body["result"]

    @staticmethod
    def _error_description(response: requests.Response) -> str:
        try:
            error = response.json().get("error") or {}
            return error.get("description") or error.get("message") or response.text[:200]
        except (ValueError, AttributeError):
            return response.text[:200]
