"""Strapi REST API client for making authenticated requests."""
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from cms_gateway.domain.errors import CMSError, CMSErrorCode
from cms_gateway.infrastructure.clients.error_mapping import (
    error_from_exception,
    error_from_response,
)
from cms_gateway.middleware.monitoring import track_backend_request

DEFAULT_PAGE_SIZE = 100
MAX_PAGES = 50


class StrapiAPIClient:
    """
    Client for the Strapi REST API.

    Handles bearer authentication, pagination and error mapping. Every
    failure leaves this class as a CMSError.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Strapi API client.

        Args:
            base_url: Strapi server URL (without the /api suffix)
            api_token: API token for authentication
            timeout: Request timeout in seconds
            session: Optional preconfigured session (Dependency Injection)
        """
        self.base_url = base_url.rstrip('/')
        self.api_token = api_token
        self.timeout = timeout
        self._logger = logging.getLogger(__name__)
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry strategy."""
        session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=20)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make an authenticated GET request to the Strapi API.

        Args:
            endpoint: API endpoint relative to /api (e.g. "/products")
            params: Optional query parameters

        Returns:
            Response JSON as dictionary

        Raises:
            CMSError: If the request fails or the body is not JSON
        """
        url = f"{self.base_url}/api/{endpoint.lstrip('/')}"
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_token}",
        }

        started_at = time.monotonic()
        try:
            response = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
            self._logger.debug(f"Request: GET {url} params={params} -> {response.status_code}")

            if not response.ok:
                error = error_from_response("Strapi", response)
                self._logger.error(f"HTTP error {response.status_code}: GET {url}")
                self._logger.debug(f"Response text: {response.text[:500]}")
                raise error

            try:
                data = response.json()
            except ValueError as json_error:
                self._logger.error(f"Non-JSON response from GET {url}: {response.text[:200]}")
                raise CMSError(
                    f"Expected JSON response from Strapi but got: {response.text[:200]}",
                    CMSErrorCode.INVALID_RESPONSE,
                    json_error
                ) from json_error
        except CMSError as e:
            track_backend_request("strapi", e.code.value, started_at)
            raise
        except requests.exceptions.RequestException as e:
            self._logger.error(f"API request failed: GET {url} - {e}")
            error = error_from_exception("Strapi", e)
            track_backend_request("strapi", error.code.value, started_at)
            raise error from e

        track_backend_request("strapi", "success", started_at)
        if not isinstance(data, dict):
            raise CMSError("Strapi response is not a JSON object", CMSErrorCode.INVALID_RESPONSE)
        return data

    def get_collection(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch every item of a collection type, following pagination.

        Args:
            endpoint: Collection endpoint (e.g. "/products")
            params: Filters, sort and populate parameters
            limit: Optional maximum number of items (single page request)

        Returns:
            Raw collection items

        Raises:
            CMSError: If any page fails
        """
        params = dict(params or {})
        if limit:
            params["pagination[page]"] = 1
            params["pagination[pageSize]"] = limit
            return self._items(self.get(endpoint, params))

        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            params["pagination[page]"] = page
            params["pagination[pageSize]"] = DEFAULT_PAGE_SIZE
            response = self.get(endpoint, params)
            items.extend(self._items(response))

            pagination = (response.get("meta") or {}).get("pagination") or {}
            page_count = pagination.get("pageCount") or 1
            if page >= page_count or page >= MAX_PAGES:
                if page_count > MAX_PAGES:
                    self._logger.warning(
                        f"Stopped paging {endpoint} after {MAX_PAGES} of {page_count} pages"
                    )
                return items
            page += 1

    def get_single(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Fetch a single type (e.g. the export statistics snapshot).

        Returns:
            Raw item, or None when Strapi reports it absent
        """
        try:
            response = self.get(endpoint, params)
        except CMSError as e:
            if e.code is CMSErrorCode.NOT_FOUND:
                return None
            raise
        data = response.get("data")
        if data is not None and not isinstance(data, dict):
            raise CMSError(f"Strapi single type {endpoint} is not an object", CMSErrorCode.INVALID_RESPONSE)
        return data

    @staticmethod
    def _items(response: Dict[str, Any]) -> List[Dict[str, Any]]:
        data = response.get("data")
        if data is None:
            return []
        if not isinstance(data, list):
            raise CMSError("Strapi collection response has no data list", CMSErrorCode.INVALID_RESPONSE)
        return data
