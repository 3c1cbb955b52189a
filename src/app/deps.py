from typing import Any, Iterator

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from channels.base import CatalogClient, get_client
from pipeline.state import CreationRequest

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def client_or_501() -> Iterator[CatalogClient]:
    c = get_client()
    if c is None:
        raise HTTPException(
            status_code=501,
            detail="Shopify client not configured. Set SHOPIFY_SHOP_DOMAIN and SHOPIFY_ACCESS_TOKEN.",
        )
    try:
        yield c
    finally:
        c.close()


async def creation_request(request: Request) -> CreationRequest:
    """Read the product form either as form fields or as a JSON object."""
    ctype = request.headers.get("content-type", "").lower()
    raw: Any
    if ctype.startswith(FORM_TYPES):
        form = await request.form()
        raw = {k: v for k, v in form.items() if isinstance(v, str)}
    else:
        try:
            raw = await request.json()
        except ValueError:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "request body is not valid JSON", "input": None}]
            )
    try:
        return CreationRequest.model_validate(raw)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        raise RequestValidationError([{**e, "loc": ("body", *e["loc"])} for e in errors])
