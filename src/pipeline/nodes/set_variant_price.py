import math
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from channels.base import GraphQLClient
from channels.operations import VARIANT_UPDATE
from pipeline.state import ErrorKind, Failure, OrchestrationState, StepOutcome, Success, UpdatedVariant
from .envelope import log_outcome, run_operation


class _VariantUpdatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_variant: UpdatedVariant = Field(alias="productVariant")


def _parse_price(raw: str) -> Tuple[Optional[float], str]:
    try:
        price = Decimal(str(raw).strip())
    except InvalidOperation:
        return None, f"price:not_numeric({raw!r})"
    if not price.is_finite():
        return None, f"price:not_finite({raw!r})"
    if price < 0:
        return None, f"price:negative({raw!r})"
    # sent as a JSON number; must survive the float conversion
    value = float(price)
    if math.isinf(value) or (value == 0.0 and price != 0):
        return None, f"price:out_of_range({raw!r})"
    return value, ""


def set_variant_price(client: GraphQLClient, variant_id: str, price: str) -> StepOutcome:
    parsed, msg = _parse_price(price)
    if parsed is None:
        return Failure(kind=ErrorKind.INVALID_INPUT, detail=msg)
    outcome = run_operation(
        client,
        VARIANT_UPDATE,
        {"input": {"id": variant_id, "price": parsed}},
        root="productVariantUpdate",
        model=_VariantUpdatePayload,
    )
    if isinstance(outcome, Success):
        return Success(value=outcome.value.product_variant)
    return outcome


def set_variant_price_node(state: OrchestrationState, *, client: GraphQLClient) -> dict:
    outcome = set_variant_price(client, state.variant_id, state.request.price)
    log_outcome("productVariantUpdate", outcome)
    return {"variant_result": outcome}
