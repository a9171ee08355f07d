"""Tests for the FatSecret HTTP adapter."""

import asyncio

import httpx
import pytest

from little_bites.adapters.fatsecret_client import (
    FatSecretApiError,
    HttpxFatSecretClient,
)


def _client(handler) -> HttpxFatSecretClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxFatSecretClient(
        client_id="id",
        client_secret="secret",
        base_url="https://api.test/rest/server.api",
        token_url="https://oauth.test/connect/token",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_token_is_fetched_once_and_reused() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.host)
        if request.url.host == "oauth.test":
            assert request.headers["Authorization"].startswith("Basic ")
            assert b"grant_type=client_credentials" in request.content
            return httpx.Response(
                200, json={"access_token": "abc", "expires_in": 86400}
            )
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.url.params["format"] == "json"
        return httpx.Response(200, json={"foods": {"food": []}})

    client = _client(handler)

    asyncio.run(client.search_foods("0123"))
    asyncio.run(client.search_foods("0456"))

    assert seen.count("oauth.test") == 1


def test_search_and_get_normalize_single_entries() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth.test":
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 3600})
        if request.url.params["method"] == "foods.search":
            assert request.url.params["search_expression"] == "4006381333931"
            return httpx.Response(
                200,
                json={"foods": {"food": {"food_id": "7", "food_name": "Oat Bites"}}},
            )
        assert request.url.params["method"] == "food.get.v2"
        assert request.url.params["food_id"] == "7"
        return httpx.Response(
            200,
            json={
                "food": {
                    "food_id": "7",
                    "servings": {"serving": {"serving_description": "1 cup"}},
                }
            },
        )

    client = _client(handler)

    foods = asyncio.run(client.search_foods("4006381333931"))
    food = asyncio.run(client.get_food("7"))

    assert foods == [{"food_id": "7", "food_name": "Oat Bites"}]
    assert food["servings"] == {"serving": [{"serving_description": "1 cup"}]}


@pytest.mark.parametrize(
    ("status_code", "message"),
    [
        (401, "Invalid API credentials or token expired"),
        (403, "API access denied"),
        (404, "Product not found in nutrition database"),
        (429, "API rate limit exceeded. Please try again later"),
        (500, "FatSecret server error"),
        (503, "Server error: 503 Service Unavailable"),
    ],
)
def test_error_statuses_are_translated(status_code: int, message: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth.test":
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 3600})
        return httpx.Response(status_code)

    client = _client(handler)

    with pytest.raises(FatSecretApiError) as excinfo:
        asyncio.run(client.search_foods("apple"))

    assert str(excinfo.value) == message
    assert excinfo.value.status_code == status_code


def test_missing_token_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"token_type": "Bearer"})

    client = _client(handler)

    with pytest.raises(FatSecretApiError, match="access token"):
        asyncio.run(client.get_access_token())
