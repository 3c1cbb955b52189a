from typing import Any, Dict, Optional

from pydantic import BaseModel

from .state import Failure, NotAttempted, OrchestrationState, StepOutcome, Success

SUCCEEDED = "succeeded"
PARTIALLY_SUCCEEDED = "partially_succeeded"
FAILED = "failed"


def _value(outcome: Optional[StepOutcome]) -> Any:
    if not isinstance(outcome, Success):
        return None
    v = outcome.value
    return v.model_dump(by_alias=True) if isinstance(v, BaseModel) else v


def _dump(outcome: Optional[StepOutcome]) -> Dict[str, Any]:
    if outcome is None:
        outcome = NotAttempted(reason="step did not run")
    if isinstance(outcome, Success):
        return {"status": outcome.status, "value": _value(outcome)}
    return outcome.model_dump(mode="json", by_alias=True)


def aggregate(state: OrchestrationState) -> Dict[str, Any]:
    """Build the caller-facing result from a finished orchestration.

    A failed product creation yields only that failure. Otherwise the result
    carries the product id and one entry per follow-up step; any failed
    follow-up makes the status ``partially_succeeded``. Skipped steps do not.
    """
    if not isinstance(state.product_result, Success):
        return {"status": FAILED, "steps": {"product": _dump(state.product_result)}}

    steps = {
        "product": _dump(state.product_result),
        "variant": _dump(state.variant_result),
        "collection": _dump(state.collection_result),
        "media": _dump(state.media_result),
    }
    leaves = (state.variant_result, state.collection_result, state.media_result)
    partial = any(isinstance(o, Failure) for o in leaves)
    return {
        "status": PARTIALLY_SUCCEEDED if partial else SUCCEEDED,
        "productId": state.entity_id,
        "variantId": state.variant_id,
        "product": _value(state.product_result),
        "variant": _value(state.variant_result),
        "steps": steps,
    }
