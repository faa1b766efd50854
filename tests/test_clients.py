"""Tests for the Strapi and Sanity HTTP clients."""

import json
from unittest.mock import Mock

import pytest
import requests

from cms_gateway.domain.errors import CMSError, CMSErrorCode
from cms_gateway.infrastructure.clients import SanityAPIClient, StrapiAPIClient
from cms_gateway.infrastructure.clients.error_mapping import (
    error_code_for_status,
    invalid_response_guard,
)


def make_response(status=200, body=None, text=None):
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.reason = "Reason"
    if isinstance(body, Exception):
        response.json.side_effect = body
        response.text = text or "<html>oops</html>"
    else:
        response.json.return_value = body
        response.text = text if text is not None else json.dumps(body)
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def strapi(session):
    return StrapiAPIClient("https://cms.example.com/", "strapi-token", session=session)


@pytest.fixture
def sanity(session):
    return SanityAPIClient("abc123", "production", api_token="read-token", session=session)


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status, code",
        [
            (401, CMSErrorCode.UNAUTHORIZED),
            (403, CMSErrorCode.UNAUTHORIZED),
            (404, CMSErrorCode.NOT_FOUND),
            (429, CMSErrorCode.RATE_LIMITED),
            (500, CMSErrorCode.UNKNOWN),
            (418, CMSErrorCode.UNKNOWN),
        ],
    )
    def test_status_codes(self, status, code):
        assert error_code_for_status(status) is code

    def test_guard_maps_shape_errors(self):
        with pytest.raises(CMSError) as excinfo:
            with invalid_response_guard("Strapi", "product"):
                {}["slug"]

        assert excinfo.value.code is CMSErrorCode.INVALID_RESPONSE
        assert isinstance(excinfo.value.cause, KeyError)

    def test_guard_passes_cms_errors_through(self):
        with pytest.raises(CMSError) as excinfo:
            with invalid_response_guard("Strapi", "product"):
                raise CMSError("gone", CMSErrorCode.NOT_FOUND)

        assert excinfo.value.code is CMSErrorCode.NOT_FOUND


class TestStrapiAPIClient:
    def test_get_sends_bearer_token(self, strapi, session):
        session.get.return_value = make_response(body={"data": []})

        assert strapi.get("/products", {"sort": "order:asc"}) == {"data": []}

        args, kwargs = session.get.call_args
        assert args[0] == "https://cms.example.com/api/products"
        assert kwargs["headers"]["Authorization"] == "Bearer strapi-token"
        assert kwargs["params"] == {"sort": "order:asc"}
        assert kwargs["timeout"] == 30

    @pytest.mark.parametrize(
        "status, code",
        [(401, CMSErrorCode.UNAUTHORIZED), (404, CMSErrorCode.NOT_FOUND), (503, CMSErrorCode.UNKNOWN)],
    )
    def test_http_errors_are_mapped(self, strapi, session, status, code):
        session.get.return_value = make_response(status=status, body={"error": {}})

        with pytest.raises(CMSError) as excinfo:
            strapi.get("/products")

        assert excinfo.value.code is code

    @pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
    def test_transport_errors_are_connection_errors(self, strapi, session, error):
        session.get.side_effect = error

        with pytest.raises(CMSError) as excinfo:
            strapi.get("/products")

        assert excinfo.value.code is CMSErrorCode.CONNECTION_ERROR
        assert excinfo.value.cause is error

    def test_non_json_body_is_invalid_response(self, strapi, session):
        session.get.return_value = make_response(body=ValueError("no json"))

        with pytest.raises(CMSError) as excinfo:
            strapi.get("/products")

        assert excinfo.value.code is CMSErrorCode.INVALID_RESPONSE

    def test_collection_follows_pagination(self, strapi, session):
        session.get.side_effect = [
            make_response(body={"data": [{"id": 1}, {"id": 2}], "meta": {"pagination": {"page": 1, "pageCount": 2}}}),
            make_response(body={"data": [{"id": 3}], "meta": {"pagination": {"page": 2, "pageCount": 2}}}),
        ]

        items = strapi.get_collection("/products", {"sort": "order:asc"})

        assert [item["id"] for item in items] == [1, 2, 3]
        assert session.get.call_count == 2
        assert session.get.call_args.kwargs["params"]["pagination[page]"] == 2

    def test_collection_limit_is_single_page(self, strapi, session):
        session.get.return_value = make_response(body={"data": [{"id": 1}], "meta": {"pagination": {"pageCount": 9}}})

        items = strapi.get_collection("/articles", limit=5)

        assert items == [{"id": 1}]
        session.get.assert_called_once()
        assert session.get.call_args.kwargs["params"]["pagination[pageSize]"] == 5

    def test_collection_without_data_list_is_invalid(self, strapi, session):
        session.get.return_value = make_response(body={"data": {"id": 1}})

        with pytest.raises(CMSError) as excinfo:
            strapi.get_collection("/products")

        assert excinfo.value.code is CMSErrorCode.INVALID_RESPONSE

    def test_single_type_not_found_is_none(self, strapi, session):
        session.get.return_value = make_response(status=404, body={})

        assert strapi.get_single("/export-statistic") is None


class TestSanityAPIClient:
    def test_query_url(self):
        live = SanityAPIClient("abc123", "production", api_version="v2024-01-01", session=Mock())
        cdn = SanityAPIClient("abc123", "production", use_cdn=True, session=Mock())

        assert live.query_url == "https://abc123.api.sanity.io/v2024-01-01/data/query/production"
        assert cdn.query_url.startswith("https://abc123.apicdn.sanity.io/")

    def test_encode_params_json_encodes_values(self):
        encoded = SanityAPIClient.encode_params('*[slug.current == $slug][0]', {"slug": "cacao", "limit": 3})

        assert encoded == {"query": '*[slug.current == $slug][0]', "$slug": '"cacao"', "$limit": "3"}

    def test_fetch_returns_result(self, sanity, session):
        session.get.return_value = make_response(body={"result": [{"_id": "a"}], "ms": 4})

        assert sanity.fetch('*[_type == "product"]') == [{"_id": "a"}]
        assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer read-token"

    def test_fetch_without_token_sends_no_authorization(self, session):
        client = SanityAPIClient("abc123", "production", session=session)
        session.get.return_value = make_response(body={"result": None})

        assert client.fetch("*[0]") is None
        assert "Authorization" not in session.get.call_args.kwargs["headers"]

    def test_missing_result_is_invalid_response(self, sanity, session):
        session.get.return_value = make_response(body={"query": "*"})

        with pytest.raises(CMSError) as excinfo:
            sanity.fetch("*")

        assert excinfo.value.code is CMSErrorCode.INVALID_RESPONSE

    def test_rate_limit(self, sanity, session):
        session.get.return_value = make_response(status=429, body={"error": {"description": "slow down"}})

        with pytest.raises(CMSError) as excinfo:
            sanity.fetch("*")

        assert excinfo.value.code is CMSErrorCode.RATE_LIMITED

    def test_timeout(self, sanity, session):
        session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(CMSError) as excinfo:
            sanity.fetch("*")

        assert excinfo.value.code is CMSErrorCode.CONNECTION_ERROR
