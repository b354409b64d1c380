"""Tests for routemock.models -- aliases, defaults, and MockResponse helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest
from pydantic import ValidationError

from routemock.models import (
    DEFAULT_RESPONSES,
    DEFAULT_TTL_SECONDS,
    CachePolicy,
    MockConfig,
    MockResponse,
    ResponseSpec,
    RouteExpectation,
)


class TestCachePolicy:
    def test_defaults(self) -> None:
        policy = CachePolicy()
        assert not policy.enabled
        assert policy.ttl_seconds == DEFAULT_TTL_SECONDS
        assert policy.max_entries == 0

    @pytest.mark.parametrize("key", ["ttl", "ttlSeconds", "ttl_seconds"])
    def test_ttl_aliases(self, key: str) -> None:
        assert CachePolicy.model_validate({key: 60}).ttl_seconds == 60

    def test_zero_ttl_is_default(self) -> None:
        assert CachePolicy(ttl_seconds=0).effective_ttl == DEFAULT_TTL_SECONDS

    def test_negative_ttl_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CachePolicy.model_validate({"ttl": -1})

    def test_max_entries_camel_case(self) -> None:
        assert CachePolicy.model_validate({"maxEntries": 5}).max_entries == 5


class TestResponseSpec:
    def test_camel_case_status(self) -> None:
        spec = ResponseSpec.model_validate({"statusCode": 404, "body": {"a": 1}})
        assert spec.status_code == 404
        assert spec.body == {"a": 1}

    @pytest.mark.parametrize("code", [99, 600])
    def test_status_range(self, code: int) -> None:
        with pytest.raises(ValidationError):
            ResponseSpec(status_code=code)


class TestRouteExpectation:
    def test_method_upper_cased(self) -> None:
        assert RouteExpectation(method="post").method == "POST"

    @pytest.mark.parametrize("key", ["timeout", "delay", "delaySeconds", "delay_seconds"])
    def test_delay_aliases(self, key: str) -> None:
        assert RouteExpectation.model_validate({key: 1.5}).delay_seconds == 1.5

    def test_camel_case_document(self) -> None:
        route = RouteExpectation.model_validate(
            {
                "method": "GET",
                "path": "/search",
                "queryParams": {"q": "cats"},
                "expectedResponse": {"statusCode": 200},
                "defaultResponses": {"4xx": {"statusCode": 418}},
                "cache": {"enabled": True, "ttl": 10},
            }
        )
        assert route.query_params == {"q": "cats"}
        assert route.expected_response.status_code == 200
        assert route.default_responses["4xx"].status_code == 418
        assert route.cache.ttl_seconds == 10


class TestMockConfig:
    def test_builtin_defaults_when_absent(self) -> None:
        config = MockConfig()
        assert set(config.global_defaults) == set(DEFAULT_RESPONSES)
        assert config.global_defaults["2xx"].body == {"status": "success"}

    def test_builtin_defaults_are_copied(self) -> None:
        config = MockConfig()
        config.global_defaults["2xx"].body = {"changed": True}
        assert DEFAULT_RESPONSES["2xx"].body == {"status": "success"}

    def test_explicit_defaults_kept(self) -> None:
        config = MockConfig.model_validate(
            {"globalDefaults": {"2xx": {"statusCode": 204}}}
        )
        assert set(config.global_defaults) == {"2xx"}

    def test_zero_global_ttl_replaced(self) -> None:
        config = MockConfig.model_validate({"globalCache": {"enabled": True, "ttl": 0}})
        assert config.global_cache.ttl_seconds == DEFAULT_TTL_SECONDS


class TestMockResponse:
    def _response(self, **kwargs) -> MockResponse:
        fields = {
            "status_code": 200,
            "headers": httpx.Headers({"Content-Type": "application/json"}),
            "raw_body": b'{"a":1}',
            "parsed_body": {"a": 1},
            "content_type": "application/json",
        }
        fields.update(kwargs)
        return MockResponse(**fields)

    def test_frozen(self) -> None:
        response = self._response()
        with pytest.raises(ValidationError):
            response.status_code = 500

    def test_decode_json(self) -> None:
        assert self._response().decode_json() == {"a": 1}

    def test_decode_empty_body(self) -> None:
        assert self._response(raw_body=b"").decode_json() is None

    @pytest.mark.parametrize(("code", "ok"), [(200, True), (299, True), (301, False), (404, False)])
    def test_is_success(self, code: int, ok: bool) -> None:
        assert self._response(status_code=code).is_success is ok

    def test_to_httpx(self) -> None:
        stamp = datetime.now(timezone.utc)
        request = httpx.Request("GET", "https://mock.local/test")
        response = self._response(status_code=201, cached_at=stamp).to_httpx(request)
        assert isinstance(response, httpx.Response)
        assert response.status_code == 201
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"a": 1}
        assert response.request is request
