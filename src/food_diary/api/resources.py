"""Proxy routes that forward resource requests to the external backend.

Each route makes exactly one gateway call. Results map to status codes as
follows: data -> 200, no data or a delete/mark operation -> 204, a backend
4xx -> 400, any other backend failure -> 500, and an exception while parsing
parameters or dispatching -> 500 with the exception message in ``details``.
"""

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from food_diary.adapters.backend_gateway import BackendGateway
from food_diary.api.request_models import (
    AddEntryIngredientBody,
    AddEntryMealBody,
    AddEntrySupplementBody,
    AddEntrySymptomBody,
    CreateEntryBody,
    CreateMealBody,
    IngredientRef,
    NameBody,
    NotesBody,
    TitleBody,
)
from food_diary.domain.results import ApiResult, ErrorKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["resources"])

ProxyHandler = Callable[..., Awaitable[ApiResult]]
BodyT = TypeVar("BodyT", bound=BaseModel)


def parse_id(raw: object) -> int:
    """Parse a base-10 integer identifier."""
    if isinstance(raw, bool):
        raise ValueError(f"Invalid id: {raw!r}")
    if isinstance(raw, int):
        return raw
    return int(str(raw).strip(), 10)


def parse_date(raw: object) -> datetime:
    """Parse an ISO-8601 date or datetime, assuming UTC when no offset is given."""
    if not isinstance(raw, str):
        raise ValueError(f"Invalid date: {raw!r}")
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def result_response(result: ApiResult, *, no_content: bool = False) -> Response:
    """Translate a gateway result into an HTTP response."""
    if not result.ok:
        status_code = 400 if result.error_kind is ErrorKind.CLIENT else 500
        return JSONResponse({"error": result.error}, status_code=status_code)
    if no_content or result.data is None:
        return Response(status_code=204)
    return JSONResponse(result.data)


def proxy(
    failure_message: str, *, no_content: bool = False
) -> Callable[[ProxyHandler], Callable[..., Awaitable[Response]]]:
    """Wrap a handler that returns an ``ApiResult`` into a route endpoint."""

    def decorator(handler: ProxyHandler) -> Callable[..., Awaitable[Response]]:
        @functools.wraps(handler)
        async def endpoint(*args: Any, **kwargs: Any) -> Response:
            try:
                result = await handler(*args, **kwargs)
            except Exception as exc:
                logger.exception(failure_message)
                return JSONResponse(
                    {"error": failure_message, "details": str(exc)},
                    status_code=500,
                )
            return result_response(result, no_content=no_content)

        endpoint.__signature__ = inspect.signature(handler).replace(  # type: ignore[attr-defined]
            return_annotation=Response
        )
        return endpoint

    return decorator


def _gateway(request: Request) -> BackendGateway:
    return request.app.state.container.gateway


async def _parse_body(request: Request, model: type[BodyT]) -> BodyT:
    return model.model_validate(await request.json())


def _normalize_notes(resource_key: str) -> Callable[[object], dict[str, object]]:
    def convert(data: object) -> dict[str, object]:
        if not isinstance(data, dict):
            raise TypeError("Expected an object")
        return {
            "id": data[resource_key],
            "entryId": data["entryId"],
            resource_key: data[resource_key],
            "notes": data.get("notes"),
        }

    return convert


def _require_data(result: ApiResult, failure_message: str) -> ApiResult:
    if result.ok and result.data is None:
        return ApiResult.failure(failure_message, ErrorKind.SERVER, result.status_code)
    return result


# Entries


@router.get("/entries")
@proxy("Failed to fetch entries")
async def list_entries(request: Request) -> ApiResult:
    return await _gateway(request).get_entries()


@router.post("/entries")
@proxy("Failed to create entry")
async def create_entry(request: Request) -> ApiResult:
    body = await _parse_body(request, CreateEntryBody)
    return await _gateway(request).create_entry(parse_date(body.date), body.symptomatic)


# Catalogs


@router.get("/ingredients")
@proxy("Failed to fetch ingredients")
async def list_ingredients(request: Request) -> ApiResult:
    return await _gateway(request).get_ingredients()


@router.post("/ingredients")
@proxy("Failed to create ingredient")
async def create_ingredient(request: Request) -> ApiResult:
    body = await _parse_body(request, NameBody)
    return await _gateway(request).create_ingredient(body.name)


@router.get("/symptoms")
@proxy("Failed to fetch symptoms")
async def list_symptoms(request: Request) -> ApiResult:
    return await _gateway(request).get_symptoms()


@router.post("/symptoms")
@proxy("Failed to create symptom")
async def create_symptom(request: Request) -> ApiResult:
    body = await _parse_body(request, TitleBody)
    return await _gateway(request).create_symptom(body.title)


@router.get("/supplements")
@proxy("Failed to fetch supplements")
async def list_supplements(request: Request) -> ApiResult:
    return await _gateway(request).get_supplements()


@router.post("/supplements")
@proxy("Failed to create supplement")
async def create_supplement(request: Request) -> ApiResult:
    body = await _parse_body(request, NameBody)
    return await _gateway(request).create_supplement(body.name)


@router.get("/supplements/{supplement_id}")
@proxy("Failed to fetch supplement")
async def get_supplement(supplement_id: str, request: Request) -> ApiResult:
    return await _gateway(request).get_supplement(parse_id(supplement_id))


@router.delete("/supplements/{supplement_id}")
@proxy("Failed to delete supplement", no_content=True)
async def delete_supplement(supplement_id: str, request: Request) -> ApiResult:
    return await _gateway(request).delete_supplement(parse_id(supplement_id))


# Entry ingredients


@router.get("/entry-ingredients/{entry_id}")
@proxy("Failed to fetch entry ingredients")
async def list_entry_ingredients(entry_id: str, request: Request) -> ApiResult:
    return await _gateway(request).get_entry_ingredients(parse_id(entry_id))


@router.post("/entry-ingredients/{entry_id}")
@proxy("Failed to add entry ingredient")
async def add_entry_ingredient(entry_id: str, request: Request) -> ApiResult:
    parsed_entry_id = parse_id(entry_id)
    body = await _parse_body(request, AddEntryIngredientBody)
    return await _gateway(request).add_entry_ingredient(
        parsed_entry_id, body.ingredient_id, body.notes
    )


@router.put("/entry-ingredients/{entry_id}/{ingredient_id}")
@proxy("Failed to update ingredient notes")
async def update_entry_ingredient_notes(
    entry_id: str, ingredient_id: str, request: Request
) -> ApiResult:
    parsed_entry_id = parse_id(entry_id)
    parsed_ingredient_id = parse_id(ingredient_id)
    body = await _parse_body(request, NotesBody)
    result = await _gateway(request).update_entry_ingredient_notes(
        parsed_entry_id, parsed_ingredient_id, body.notes or ""
    )
    result = _require_data(result, "Failed to update ingredient notes")
    return result.map(_normalize_notes("ingredientId"))


@router.delete("/entry-ingredients/{entry_id}/{ingredient_id}")
@proxy("Failed to delete ingredient", no_content=True)
async def delete_entry_ingredient(
    entry_id: str, ingredient_id: str, request: Request
) -> ApiResult:
    return await _gateway(request).delete_entry_ingredient(
        parse_id(entry_id), parse_id(ingredient_id)
    )


# Entry symptoms


@router.get("/entry-symptoms/{entry_id}")
@proxy("Failed to fetch entry symptoms")
async def list_entry_symptoms(entry_id: str, request: Request) -> ApiResult:
    return await _gateway(request).get_entry_symptoms(parse_id(entry_id))


@router.post("/entry-symptoms/{entry_id}")
@proxy("Failed to add entry symptom")
async def add_entry_symptom(entry_id: str, request: Request) -> ApiResult:
    parsed_entry_id = parse_id(entry_id)
    body = await _parse_body(request, AddEntrySymptomBody)
    return await _gateway(request).add_entry_symptom(
        parsed_entry_id, body.symptom_id, body.notes
    )


@router.put("/entry-symptoms/{entry_id}/{symptom_id}")
@proxy("Failed to update symptom notes")
async def update_entry_symptom_notes(
    entry_id: str, symptom_id: str, request: Request
) -> ApiResult:
    parsed_entry_id = parse_id(entry_id)
    parsed_symptom_id = parse_id(symptom_id)
    body = await _parse_body(request, NotesBody)
    result = await _gateway(request).update_entry_symptom_notes(
        parsed_entry_id, parsed_symptom_id, body.notes or ""
    )
    result = _require_data(result, "Failed to update symptom notes")
    return result.map(_normalize_notes("symptomId"))


@router.delete("/entry-symptoms/{entry_id}/{symptom_id}")
@proxy("Failed to remove symptom", no_content=True)
async def delete_entry_symptom(
    entry_id: str, symptom_id: str, request: Request
) -> ApiResult:
    return await _gateway(request).delete_entry_symptom(
        parse_id(entry_id), parse_id(symptom_id)
    )


# Entry supplements


@router.post("/entry-supplements")
@proxy("Failed to add supplement to entry")
async def add_entry_supplement(request: Request) -> ApiResult:
    body = await _parse_body(request, AddEntrySupplementBody)
    return await _gateway(request).add_entry_supplement(
        body.entry_id, body.supplement_id
    )


@router.get("/entry-supplements/by-entry/{entry_id}")
@proxy("Failed to fetch entry supplements")
async def list_entry_supplements(entry_id: str, request: Request) -> ApiResult:
    return await _gateway(request).get_entry_supplements(parse_id(entry_id))


@router.delete("/entry-supplements/{entry_id}/{supplement_id}")
@proxy("Failed to remove supplement from entry", no_content=True)
async def delete_entry_supplement(
    entry_id: str, supplement_id: str, request: Request
) -> ApiResult:
    return await _gateway(request).delete_entry_supplement(
        parse_id(entry_id), parse_id(supplement_id)
    )


# Safe / unsafe ingredients


@router.get("/safe-ingredients")
@proxy("Failed to fetch safe ingredients")
async def list_safe_ingredients(request: Request) -> ApiResult:
    return await _gateway(request).get_safe_ingredients()


@router.post("/safe-ingredients")
@proxy("Failed to mark ingredient as safe", no_content=True)
async def mark_safe_ingredient(request: Request) -> ApiResult:
    body = await _parse_body(request, IngredientRef)
    return await _gateway(request).mark_ingredient_safe(body.ingredient_id)


@router.delete("/safe-ingredients/{ingredient_id}")
@proxy("Failed to remove safe ingredient", no_content=True)
async def remove_safe_ingredient(ingredient_id: str, request: Request) -> ApiResult:
    return await _gateway(request).remove_safe_ingredient(parse_id(ingredient_id))


@router.get("/unsafe-ingredients")
@proxy("Failed to fetch unsafe ingredients")
async def list_unsafe_ingredients(request: Request) -> ApiResult:
    return await _gateway(request).get_unsafe_ingredients()


@router.post("/unsafe-ingredients")
@proxy("Failed to mark ingredient as unsafe", no_content=True)
async def mark_unsafe_ingredient(request: Request) -> ApiResult:
    body = await _parse_body(request, IngredientRef)
    return await _gateway(request).mark_ingredient_unsafe(body.ingredient_id)


@router.delete("/unsafe-ingredients/{ingredient_id}")
@proxy("Failed to remove unsafe ingredient", no_content=True)
async def remove_unsafe_ingredient(ingredient_id: str, request: Request) -> ApiResult:
    return await _gateway(request).remove_unsafe_ingredient(parse_id(ingredient_id))


# Meals


@router.get("/meals")
@proxy("Failed to fetch meals")
async def list_meals(request: Request) -> ApiResult:
    return await _gateway(request).get_meals()


@router.post("/meals")
@proxy("Failed to create meal")
async def create_meal(request: Request) -> ApiResult:
    body = await _parse_body(request, CreateMealBody)
    return await _gateway(request).create_meal(body.name, body.ingredient_ids)


@router.post("/meals/{meal_id}/ingredients")
@proxy("Failed to add ingredient to meal")
async def add_meal_ingredient(meal_id: str, request: Request) -> ApiResult:
    parsed_meal_id = parse_id(meal_id)
    body = await _parse_body(request, IngredientRef)
    return await _gateway(request).add_meal_ingredient(
        parsed_meal_id, body.ingredient_id
    )


@router.delete("/meals/{meal_id}/ingredients/{ingredient_id}")
@proxy("Failed to remove ingredient from meal", no_content=True)
async def delete_meal_ingredient(
    meal_id: str, ingredient_id: str, request: Request
) -> ApiResult:
    return await _gateway(request).delete_meal_ingredient(
        parse_id(meal_id), parse_id(ingredient_id)
    )


@router.get("/entry-meals/{entry_id}")
@proxy("Failed to fetch entry meals")
async def list_entry_meals(entry_id: str, request: Request) -> ApiResult:
    return await _gateway(request).get_entry_meals(parse_id(entry_id))


@router.post("/entry-meals")
@proxy("Failed to add meal to entry")
async def add_entry_meal(request: Request) -> ApiResult:
    body = await _parse_body(request, AddEntryMealBody)
    return await _gateway(request).add_entry_meal(
        body.entry_id, body.meal_id
    )


@router.delete("/entry-meals/{entry_id}/{meal_id}")
@proxy("Failed to remove meal from entry", no_content=True)
async def delete_entry_meal(entry_id: str, meal_id: str, request: Request) -> ApiResult:
    return await _gateway(request).delete_entry_meal(
        parse_id(entry_id), parse_id(meal_id)
    )
