"""HTTP gateway to the external food diary backend."""

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import httpx

from food_diary.domain.results import INVALID_RESPONSE_FORMAT, ApiResult, ErrorKind

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 15


class BackendGateway(Protocol):
    """Interface for calls against the external backend.

    Every operation returns an :class:`ApiResult` and never raises for
    HTTP-level, transport or parse failures.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: object | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResult:
        """Send a request to the backend and normalize the outcome."""

    async def get_entries(self) -> ApiResult:
        """Return all diary entries."""

    async def create_entry(self, date: datetime, symptomatic: bool = False) -> ApiResult:
        """Create an entry for a date."""

    async def get_ingredients(self) -> ApiResult:
        """Return the ingredient catalog."""

    async def create_ingredient(self, name: str) -> ApiResult:
        """Create a catalog ingredient."""

    async def get_symptoms(self) -> ApiResult:
        """Return the symptom catalog."""

    async def create_symptom(self, title: str) -> ApiResult:
        """Create a catalog symptom."""

    async def get_supplements(self) -> ApiResult:
        """Return the supplement catalog."""

    async def get_supplement(self, supplement_id: int) -> ApiResult:
        """Return a single supplement."""

    async def create_supplement(self, name: str) -> ApiResult:
        """Create a catalog supplement."""

    async def delete_supplement(self, supplement_id: int) -> ApiResult:
        """Delete a catalog supplement."""

    async def get_entry_ingredients(self, entry_id: int) -> ApiResult:
        """Return ingredients attached to an entry."""

    async def add_entry_ingredient(
        self, entry_id: int, ingredient_id: int, notes: str | None = None
    ) -> ApiResult:
        """Attach an ingredient to an entry."""

    async def update_entry_ingredient_notes(
        self, entry_id: int, ingredient_id: int, notes: str
    ) -> ApiResult:
        """Update notes on an entry ingredient."""

    async def delete_entry_ingredient(self, entry_id: int, ingredient_id: int) -> ApiResult:
        """Detach an ingredient from an entry."""

    async def get_entry_symptoms(self, entry_id: int) -> ApiResult:
        """Return symptoms attached to an entry."""

    async def add_entry_symptom(
        self, entry_id: int, symptom_id: int, notes: str | None = None
    ) -> ApiResult:
        """Attach a symptom to an entry."""

    async def update_entry_symptom_notes(
        self, entry_id: int, symptom_id: int, notes: str
    ) -> ApiResult:
        """Update notes on an entry symptom."""

    async def delete_entry_symptom(self, entry_id: int, symptom_id: int) -> ApiResult:
        """Detach a symptom from an entry."""

    async def get_entry_supplements(self, entry_id: int) -> ApiResult:
        """Return supplements attached to an entry."""

    async def add_entry_supplement(self, entry_id: int, supplement_id: int) -> ApiResult:
        """Attach a supplement to an entry."""

    async def delete_entry_supplement(
        self, entry_id: int, supplement_id: int
    ) -> ApiResult:
        """Detach a supplement from an entry."""

    async def get_safe_ingredients(self) -> ApiResult:
        """Return the safe ingredient list."""

    async def mark_ingredient_safe(self, ingredient_id: int) -> ApiResult:
        """Mark an ingredient as safe."""

    async def remove_safe_ingredient(self, ingredient_id: int) -> ApiResult:
        """Remove the safe mark from an ingredient."""

    async def get_unsafe_ingredients(self) -> ApiResult:
        """Return the unsafe ingredient list."""

    async def mark_ingredient_unsafe(self, ingredient_id: int) -> ApiResult:
        """Mark an ingredient as unsafe."""

    async def remove_unsafe_ingredient(self, ingredient_id: int) -> ApiResult:
        """Remove the unsafe mark from an ingredient."""

    async def get_meals(self) -> ApiResult:
        """Return all meals."""

    async def create_meal(self, name: str, ingredient_ids: list[int]) -> ApiResult:
        """Create a meal."""

    async def add_meal_ingredient(self, meal_id: int, ingredient_id: int) -> ApiResult:
        """Add an ingredient to a meal."""

    async def delete_meal_ingredient(self, meal_id: int, ingredient_id: int) -> ApiResult:
        """Remove an ingredient from a meal."""

    async def get_entry_meals(self, entry_id: int) -> ApiResult:
        """Return meals attached to an entry."""

    async def add_entry_meal(self, entry_id: int, meal_id: int) -> ApiResult:
        """Attach a meal to an entry."""

    async def delete_entry_meal(self, entry_id: int, meal_id: int) -> ApiResult:
        """Detach a meal from an entry."""


@dataclass
class HttpxBackendGateway:
    """HTTPX-backed gateway that authenticates with a static API key."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, api_key: str) -> "HttpxBackendGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: object | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResult:
        """Send a request and normalize the response into an ``ApiResult``."""
        merged_headers = {
            "Authorization": f"ApiKey {self.api_key}",
            "Content-Type": "application/json",
            **(headers or {}),
        }
        content = json.dumps(json_body) if json_body is not None else None
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method,
                url,
                content=content,
                headers=merged_headers,
                timeout=_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as exc:
            logger.warning("Backend %s %s failed: %s", method, path, exc)
            return ApiResult.failure(str(exc) or type(exc).__name__, ErrorKind.TRANSPORT)
        return _normalize(method, path, response)

    async def get_entries(self) -> ApiResult:
        return await self.request("GET", "/entries")

    async def create_entry(self, date: datetime, symptomatic: bool = False) -> ApiResult:
        return await self.request(
            "POST",
            "/entries",
            json_body={"date": to_utc_timestamp(date), "symptomatic": symptomatic},
        )

    async def get_ingredients(self) -> ApiResult:
        return await self.request("GET", "/ingredients")

    async def create_ingredient(self, name: str) -> ApiResult:
        return await self.request("POST", "/ingredients", json_body={"name": name})

    async def get_symptoms(self) -> ApiResult:
        return await self.request("GET", "/symptoms")

    async def create_symptom(self, title: str) -> ApiResult:
        return await self.request("POST", "/symptoms", json_body={"title": title})

    async def get_supplements(self) -> ApiResult:
        return await self.request("GET", "/supplements")

    async def get_supplement(self, supplement_id: int) -> ApiResult:
        return await self.request("GET", f"/supplements/{supplement_id}")

    async def create_supplement(self, name: str) -> ApiResult:
        return await self.request("POST", "/supplements", json_body={"name": name})

    async def delete_supplement(self, supplement_id: int) -> ApiResult:
        return await self.request("DELETE", f"/supplements/{supplement_id}")

    async def get_entry_ingredients(self, entry_id: int) -> ApiResult:
        return await self.request("GET", f"/entry-ingredients/by-entry/{entry_id}")

    async def add_entry_ingredient(
        self, entry_id: int, ingredient_id: int, notes: str | None = None
    ) -> ApiResult:
        return await self.request(
            "POST",
            "/entry-ingredients",
            json_body={"entryId": entry_id, "ingredientId": ingredient_id, "notes": notes},
        )

    async def update_entry_ingredient_notes(
        self, entry_id: int, ingredient_id: int, notes: str
    ) -> ApiResult:
        return await self.request(
            "PUT",
            f"/entry-ingredients/{entry_id}/{ingredient_id}",
            json_body={"notes": notes},
        )

    async def delete_entry_ingredient(self, entry_id: int, ingredient_id: int) -> ApiResult:
        return await self.request("DELETE", f"/entry-ingredients/{entry_id}/{ingredient_id}")

    async def get_entry_symptoms(self, entry_id: int) -> ApiResult:
        return await self.request("GET", f"/entry-symptoms/by-entry/{entry_id}")

    async def add_entry_symptom(
        self, entry_id: int, symptom_id: int, notes: str | None = None
    ) -> ApiResult:
        return await self.request(
            "POST",
            "/entry-symptoms",
            json_body={"entryId": entry_id, "symptomId": symptom_id, "notes": notes},
        )

    async def update_entry_symptom_notes(
        self, entry_id: int, symptom_id: int, notes: str
    ) -> ApiResult:
        return await self.request(
            "PUT",
            f"/entry-symptoms/{entry_id}/{symptom_id}",
            json_body={"notes": notes},
        )

    async def delete_entry_symptom(self, entry_id: int, symptom_id: int) -> ApiResult:
        return await self.request("DELETE", f"/entry-symptoms/{entry_id}/{symptom_id}")

    async def get_entry_supplements(self, entry_id: int) -> ApiResult:
        return await self.request("GET", f"/entry-supplements/by-entry/{entry_id}")

    async def add_entry_supplement(self, entry_id: int, supplement_id: int) -> ApiResult:
        return await self.request(
            "POST",
            "/entry-supplements",
            json_body={"entryId": entry_id, "supplementId": supplement_id},
        )

    async def delete_entry_supplement(
        self, entry_id: int, supplement_id: int
    ) -> ApiResult:
        return await self.request(
            "DELETE", f"/entry-supplements/{entry_id}/{supplement_id}"
        )

    async def get_safe_ingredients(self) -> ApiResult:
        return await self.request("GET", "/safe-ingredients")

    async def mark_ingredient_safe(self, ingredient_id: int) -> ApiResult:
        return await self.request(
            "POST", "/safe-ingredients", json_body={"ingredientId": ingredient_id}
        )

    async def remove_safe_ingredient(self, ingredient_id: int) -> ApiResult:
        return await self.request("DELETE", f"/safe-ingredients/{ingredient_id}")

    async def get_unsafe_ingredients(self) -> ApiResult:
        return await self.request("GET", "/unsafe-ingredients")

    async def mark_ingredient_unsafe(self, ingredient_id: int) -> ApiResult:
        return await self.request(
            "POST", "/unsafe-ingredients", json_body={"ingredientId": ingredient_id}
        )

    async def remove_unsafe_ingredient(self, ingredient_id: int) -> ApiResult:
        return await self.request("DELETE", f"/unsafe-ingredients/{ingredient_id}")

    async def get_meals(self) -> ApiResult:
        return await self.request("GET", "/meals")

    async def create_meal(self, name: str, ingredient_ids: list[int]) -> ApiResult:
        return await self.request(
            "POST", "/meals", json_body={"name": name, "ingredientIds": ingredient_ids}
        )

    async def add_meal_ingredient(self, meal_id: int, ingredient_id: int) -> ApiResult:
        return await self.request(
            "POST",
            f"/meals/{meal_id}/ingredients",
            json_body={"ingredientId": ingredient_id},
        )

    async def delete_meal_ingredient(self, meal_id: int, ingredient_id: int) -> ApiResult:
        return await self.request("DELETE", f"/meals/{meal_id}/ingredients/{ingredient_id}")

    async def get_entry_meals(self, entry_id: int) -> ApiResult:
        return await self.request("GET", f"/entry-meals/by-entry/{entry_id}")

    async def add_entry_meal(self, entry_id: int, meal_id: int) -> ApiResult:
        return await self.request(
            "POST", "/entry-meals", json_body={"entryId": entry_id, "mealId": meal_id}
        )

    async def delete_entry_meal(self, entry_id: int, meal_id: int) -> ApiResult:
        return await self.request("DELETE", f"/entry-meals/{entry_id}/{meal_id}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _normalize(method: str, path: str, response: httpx.Response) -> ApiResult:
    status_code = response.status_code
    if not response.is_success:
        message = f"HTTP error! status: {status_code}, message: {response.text}"
        logger.warning("Backend %s %s returned %s", method, path, status_code)
        kind = ErrorKind.CLIENT if 400 <= status_code < 500 else ErrorKind.SERVER
        return ApiResult.failure(message, kind, status_code)
    if status_code == 204 or not response.content.strip():
        return ApiResult.success(None, status_code)
    try:
        data = response.json()
    except ValueError:
        logger.warning("Backend %s %s returned malformed JSON", method, path)
        return ApiResult.failure(INVALID_RESPONSE_FORMAT, ErrorKind.PARSE, status_code)
    return ApiResult.success(data, status_code)


def to_utc_timestamp(value: datetime) -> str:
    """Format ``value`` as a UTC timestamp with millisecond precision and a ``Z`` suffix.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    utc_value = value.astimezone(UTC)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
