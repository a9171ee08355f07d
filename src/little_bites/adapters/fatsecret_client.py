"""FatSecret Platform API client."""

import time
from dataclasses import dataclass, field
from typing import Protocol

import httpx

_TOKEN_EXPIRY_BUFFER_SECONDS = 60

_STATUS_MESSAGES = {
    401: "Invalid API credentials or token expired",
    403: "API access denied",
    404: "Product not found in nutrition database",
    429: "API rate limit exceeded. Please try again later",
    500: "FatSecret server error",
}


class FatSecretApiError(RuntimeError):
    """Raised when the FatSecret API returns an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FatSecretClient(Protocol):
    """Interface for FatSecret API interactions."""

    async def get_access_token(self) -> str:
        """Return a valid OAuth access token."""

    async def search_foods(
        self, expression: str, max_results: int = 10
    ) -> list[dict[str, object]]:
        """Search foods and return raw food entries."""

    async def get_food(self, food_id: str) -> dict[str, object]:
        """Fetch a food with its servings and return the raw food entry."""


@dataclass
class HttpxFatSecretClient(FatSecretClient):
    """HTTPX-backed FatSecret client using client-credentials OAuth."""

    client_id: str
    client_secret: str
    base_url: str
    token_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10
    _token: str | None = field(default=None, init=False, repr=False)
    _token_expires_at: float = field(default=0.0, init=False, repr=False)

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        client_id: str,
        client_secret: str,
        base_url: str,
        token_url: str,
        timeout_seconds: float = 10,
    ) -> "HttpxFatSecretClient":
        """Create a FatSecret client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            base_url=base_url,
            token_url=token_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_access_token(self) -> str:
        """Return the cached token, refreshing it shortly before expiry."""
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token
        response = await self.http_client.post(
            self.token_url,
            data={"grant_type": "client_credentials", "scope": "basic"},
            auth=(self.client_id, self.client_secret),
            timeout=self.timeout_seconds,
        )
        _raise_for_status(response)
        payload = response.json()
        token = payload.get("access_token")
        if not token:
            self._token = None
            self._token_expires_at = 0.0
            raise FatSecretApiError("Unable to obtain FatSecret access token")
        expires_in = float(payload.get("expires_in", 0))
        self._token = str(token)
        self._token_expires_at = (
            time.monotonic() + expires_in - _TOKEN_EXPIRY_BUFFER_SECONDS
        )
        return self._token

    async def search_foods(
        self, expression: str, max_results: int = 10
    ) -> list[dict[str, object]]:
        """Search foods by barcode or name."""
        payload = await self._call(
            {
                "method": "foods.search",
                "search_expression": expression,
                "max_results": str(max_results),
            }
        )
        foods = payload.get("foods") or {}
        return _as_list(foods.get("food"))

    async def get_food(self, food_id: str) -> dict[str, object]:
        """Fetch a food with normalized serving list."""
        payload = await self._call({"method": "food.get.v2", "food_id": food_id})
        food = payload.get("food") or (payload.get("foods") or {}).get("food")
        if not isinstance(food, dict):
            raise FatSecretApiError("No nutrition data available for this food")
        servings = food.get("servings") or {}
        return {**food, "servings": {"serving": _as_list(servings.get("serving"))}}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _call(self, params: dict[str, str]) -> dict[str, object]:
        token = await self.get_access_token()
        response = await self.http_client.get(
            self.base_url,
            params={**params, "format": "json"},
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout_seconds,
        )
        _raise_for_status(response)
        return response.json()


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    message = _STATUS_MESSAGES.get(
        response.status_code,
        f"Server error: {response.status_code} {response.reason_phrase}",
    )
    raise FatSecretApiError(message, status_code=response.status_code)


def _as_list(value: object) -> list[dict[str, object]]:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        return [value]
    return []
