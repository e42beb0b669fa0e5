"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import httpx
import pytest

from food_diary.adapters.backend_gateway import HttpxBackendGateway
from food_diary.config import Settings
from food_diary.containers import AppContainer
from food_diary.services.credentials import (
    CredentialVerifier,
    build_account,
    encode_password_hash,
    hash_password,
)
from food_diary.services.sessions import SessionIssuer

TEST_USERNAME = "alice"
TEST_PASSWORD = "correct horse"
TEST_SECRET = "test-session-secret-with-enough-bytes-for-hs256"
BACKEND_URL = "https://backend.test"


def _not_found(detail: str = "Not found") -> httpx.Response:
    return httpx.Response(404, json={"message": detail})


@dataclass
class FakeBackend:
    """In-memory stand-in for the external REST backend."""

    entries: dict[int, dict[str, object]] = field(default_factory=dict)
    ingredients: dict[int, dict[str, object]] = field(default_factory=dict)
    symptoms: dict[int, dict[str, object]] = field(default_factory=dict)
    supplements: dict[int, dict[str, object]] = field(default_factory=dict)
    meals: dict[int, dict[str, object]] = field(default_factory=dict)
    entry_ingredients: dict[tuple[int, int], dict[str, object]] = field(
        default_factory=dict
    )
    entry_symptoms: dict[tuple[int, int], dict[str, object]] = field(
        default_factory=dict
    )
    entry_supplements: dict[tuple[int, int], dict[str, object]] = field(
        default_factory=dict
    )
    entry_meals: dict[tuple[int, int], dict[str, object]] = field(default_factory=dict)
    safe: list[int] = field(default_factory=list)
    unsafe: list[int] = field(default_factory=list)
    requests: list[httpx.Request] = field(default_factory=list)
    next_id: int = 100

    def add_ingredient(self, ingredient_id: int, name: str) -> dict[str, object]:
        row = {"id": ingredient_id, "name": name}
        self.ingredients[ingredient_id] = row
        return row

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = [part for part in request.url.path.split("/") if part]
        body = json.loads(request.content) if request.content else None
        method = request.method
        resource, rest = parts[0], parts[1:]

        if resource in ("entries", "ingredients", "symptoms", "supplements"):
            return self._catalog(resource, method, rest, body)
        if resource in ("entry-ingredients", "entry-symptoms", "entry-supplements", "entry-meals"):
            return self._junction(resource, method, rest, body)
        if resource in ("safe-ingredients", "unsafe-ingredients"):
            return self._marks(resource, method, rest, body)
        if resource == "meals":
            return self._meals(method, rest, body)
        return _not_found()

    def _new_id(self) -> int:
        self.next_id += 1
        return self.next_id

    def _catalog(
        self, resource: str, method: str, rest: list[str], body: dict | None
    ) -> httpx.Response:
        table = getattr(self, resource)
        if method == "GET" and not rest:
            return httpx.Response(200, json=list(table.values()))
        if method == "POST" and not rest:
            row = {"id": self._new_id(), **(body or {})}
            table[row["id"]] = row
            return httpx.Response(201, json=row)
        record_id = int(rest[0])
        if record_id not in table:
            return _not_found()
        if method == "GET":
            return httpx.Response(200, json=table[record_id])
        if method == "DELETE":
            del table[record_id]
            return httpx.Response(204)
        return httpx.Response(405)

    def _junction(
        self, resource: str, method: str, rest: list[str], body: dict | None
    ) -> httpx.Response:
        table = getattr(self, resource.replace("-", "_"))
        other_key = {
            "entry-ingredients": "ingredientId",
            "entry-symptoms": "symptomId",
            "entry-supplements": "supplementId",
            "entry-meals": "mealId",
        }[resource]
        if method == "GET" and rest[:1] == ["by-entry"]:
            entry_id = int(rest[1])
            rows = [row for (eid, _), row in table.items() if eid == entry_id]
            return httpx.Response(200, json=rows)
        if method == "POST" and not rest:
            assert body is not None
            key = (int(body["entryId"]), int(body[other_key]))
            row = {"id": self._new_id(), **body}
            if resource == "entry-symptoms":
                symptom = self.symptoms.get(key[1], {})
                row["symptomTitle"] = symptom.get("title")
            if resource == "entry-meals":
                meal = self.meals.get(key[1], {})
                row["mealName"] = meal.get("name")
                row["ingredients"] = meal.get("ingredients", [])
            table[key] = row
            return httpx.Response(201, json=row)
        key = (int(rest[0]), int(rest[1]))
        if key not in table:
            return _not_found("Association not found")
        if method == "PUT":
            table[key] = {**table[key], "notes": (body or {}).get("notes")}
            return httpx.Response(200, json=table[key])
        if method == "DELETE":
            del table[key]
            return httpx.Response(204)
        return httpx.Response(405)

    def _marks(
        self, resource: str, method: str, rest: list[str], body: dict | None
    ) -> httpx.Response:
        marked = self.safe if resource == "safe-ingredients" else self.unsafe
        if method == "GET":
            rows = [
                {
                    "id": index + 1,
                    "ingredientId": ingredient_id,
                    "ingredient": self.ingredients[ingredient_id],
                }
                for index, ingredient_id in enumerate(marked)
            ]
            return httpx.Response(200, json=rows)
        if method == "POST":
            assert body is not None
            ingredient_id = int(body["ingredientId"])
            if ingredient_id not in marked:
                marked.append(ingredient_id)
            return httpx.Response(204)
        if method == "DELETE":
            ingredient_id = int(rest[0])
            if ingredient_id not in marked:
                return _not_found()
            marked.remove(ingredient_id)
            return httpx.Response(204)
        return httpx.Response(405)

    def _meals(self, method: str, rest: list[str], body: dict | None) -> httpx.Response:
        if method == "GET" and not rest:
            return httpx.Response(200, json=list(self.meals.values()))
        if method == "POST" and not rest:
            assert body is not None
            ingredients = [
                self.ingredients[int(i)] for i in body.get("ingredientIds") or []
            ]
            row = {"id": self._new_id(), "name": body["name"], "ingredients": ingredients}
            self.meals[row["id"]] = row
            return httpx.Response(201, json=row)
        meal = self.meals.get(int(rest[0]))
        if meal is None:
            return _not_found()
        if method == "POST" and rest[1:] == ["ingredients"]:
            assert body is not None
            meal["ingredients"].append(self.ingredients[int(body["ingredientId"])])
            return httpx.Response(201, json=meal)
        if method == "DELETE" and rest[1:2] == ["ingredients"]:
            ingredient_id = int(rest[2])
            meal["ingredients"] = [i for i in meal["ingredients"] if i["id"] != ingredient_id]
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_username=TEST_USERNAME,
        app_password_hash=encode_password_hash(
            hash_password(TEST_PASSWORD, iterations=1_000)
        ),
        session_secret=TEST_SECRET,
        api_base_url=BACKEND_URL,
        api_key="backend-key",
        disable_auth_in_dev=False,
        environment="local",
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def gateway(backend: FakeBackend) -> HttpxBackendGateway:
    transport = httpx.MockTransport(backend.handler)
    return HttpxBackendGateway(
        base_url=BACKEND_URL,
        api_key="backend-key",
        http_client=httpx.AsyncClient(transport=transport),
    )


@pytest.fixture
def session_issuer() -> SessionIssuer:
    return SessionIssuer(secret=TEST_SECRET)


@pytest.fixture
def container(
    settings: Settings,
    gateway: HttpxBackendGateway,
    session_issuer: SessionIssuer,
) -> AppContainer:
    account = build_account(settings.app_username, settings.app_password_hash)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        gateway=gateway,
        credential_verifier=CredentialVerifier(account),
        session_issuer=session_issuer,
        close_resources=close_resources,
    )
