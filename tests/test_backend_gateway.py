"""Tests for the HTTPX backend gateway."""

import asyncio
import json
from datetime import UTC, datetime, timedelta, timezone

import httpx

from food_diary.adapters.backend_gateway import HttpxBackendGateway, to_utc_timestamp
from food_diary.domain.results import INVALID_RESPONSE_FORMAT, ErrorKind


def _gateway(handler) -> HttpxBackendGateway:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxBackendGateway(
        base_url="https://backend.test",
        api_key="secret-key",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_request_sends_api_key_and_json_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 1, "date": "2024-01-15", "symptomatic": False})

    gateway = _gateway(handler)
    result = asyncio.run(
        gateway.create_entry(datetime(2024, 1, 15, tzinfo=UTC), symptomatic=False)
    )

    assert result.ok
    assert result.data == {"id": 1, "date": "2024-01-15", "symptomatic": False}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://backend.test/entries"
    assert request.headers["Authorization"] == "ApiKey secret-key"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "date": "2024-01-15T00:00:00.000Z",
        "symptomatic": False,
    }


def test_caller_headers_are_merged() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    gateway = _gateway(handler)
    asyncio.run(gateway.request("GET", "/entries", headers={"X-Trace": "abc"}))

    assert seen[0].headers["X-Trace"] == "abc"
    assert seen[0].headers["Authorization"] == "ApiKey secret-key"


def test_create_strips_trailing_slash() -> None:
    gateway = HttpxBackendGateway.create("https://backend.test/", "key")

    assert gateway.base_url == "https://backend.test"
    asyncio.run(gateway.close())


def test_no_content_yields_empty_success() -> None:
    gateway = _gateway(lambda request: httpx.Response(204))

    result = asyncio.run(gateway.delete_entry_ingredient(1, 2))

    assert result.ok
    assert result.data is None
    assert result.status_code == 204


def test_empty_body_yields_empty_success() -> None:
    gateway = _gateway(lambda request: httpx.Response(200, content=b""))

    result = asyncio.run(gateway.mark_ingredient_safe(7))

    assert result.ok
    assert result.data is None


def test_client_error_is_reported_not_raised() -> None:
    gateway = _gateway(lambda request: httpx.Response(404, text="Association not found"))

    result = asyncio.run(gateway.delete_entry_ingredient(1, 2))

    assert not result.ok
    assert result.error_kind is ErrorKind.CLIENT
    assert result.status_code == 404
    assert result.error == "HTTP error! status: 404, message: Association not found"


def test_server_error_is_reported_not_raised() -> None:
    gateway = _gateway(lambda request: httpx.Response(503, text="down"))

    result = asyncio.run(gateway.get_entries())

    assert result.error_kind is ErrorKind.SERVER
    assert result.data is None


def test_malformed_json_is_parse_error() -> None:
    gateway = _gateway(lambda request: httpx.Response(200, content=b"{not json"))

    result = asyncio.run(gateway.get_ingredients())

    assert result.error == INVALID_RESPONSE_FORMAT
    assert result.error_kind is ErrorKind.PARSE


def test_transport_error_is_reported_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = _gateway(handler)
    result = asyncio.run(gateway.get_symptoms())

    assert result.error_kind is ErrorKind.TRANSPORT
    assert "connection refused" in (result.error or "")


def test_typed_operations_hit_backend_routes(gateway, backend) -> None:
    backend.add_ingredient(7, "eggs")

    async def scenario() -> None:
        await gateway.get_entry_symptoms(41)
        await gateway.update_entry_ingredient_notes(1, 7, "x")
        await gateway.get_safe_ingredients()
        await gateway.remove_unsafe_ingredient(7)
        await gateway.create_meal("breakfast", [7])
        await gateway.delete_meal_ingredient(3, 7)
        await gateway.get_entry_meals(41)

    asyncio.run(scenario())

    assert [(r.method, r.url.path) for r in backend.requests] == [
        ("GET", "/entry-symptoms/by-entry/41"),
        ("PUT", "/entry-ingredients/1/7"),
        ("GET", "/safe-ingredients"),
        ("DELETE", "/unsafe-ingredients/7"),
        ("POST", "/meals"),
        ("DELETE", "/meals/3/ingredients/7"),
        ("GET", "/entry-meals/by-entry/41"),
    ]


def test_entry_dates_are_sent_in_utc() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 1})

    just_after_midnight = datetime(2024, 1, 15, 0, 30, tzinfo=timezone(timedelta(hours=2)))
    asyncio.run(_gateway(handler).create_entry(just_after_midnight))

    assert json.loads(seen[0].content)["date"] == "2024-01-14T22:30:00.000Z"


def test_to_utc_timestamp_treats_naive_as_utc() -> None:
    assert to_utc_timestamp(datetime(2024, 1, 15, 8, 5, 9)) == "2024-01-15T08:05:09.000Z"
