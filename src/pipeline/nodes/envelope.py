from typing import Any, Dict, List, Optional, Type

from loguru import logger
from pydantic import BaseModel, ValidationError, field_validator

from channels.base import GraphQLClient, TransportError
from pipeline.state import ErrorKind, Failure, NotAttempted, StepOutcome, Success, UserError


class GraphQLError(BaseModel):
    message: str = "unknown error"


class GraphQLEnvelope(BaseModel):
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLError]] = None

    @field_validator("errors", mode="before")
    @classmethod
    def _errors_as_list(cls, v: Any) -> Any:
        # Shopify sometimes answers `"errors": "Not Found"` or a single object
        if isinstance(v, (str, dict)):
            v = [v]
        if isinstance(v, list):
            return [{"message": e} if isinstance(e, str) else e for e in v]
        return v


# --------- helpers ---------
def _describe(exc: ValidationError, prefix: str) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in (prefix, *err["loc"]))
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _user_errors(raw: Any) -> List[UserError]:
    out: List[UserError] = []
    for e in raw if isinstance(raw, list) else [raw]:
        if isinstance(e, dict):
            out.append(UserError(field=e.get("field"), message=str(e.get("message") or "")))
        else:
            out.append(UserError(message=str(e)))
    return out


def run_operation(
    client: GraphQLClient,
    document: str,
    variables: Dict[str, Any],
    *,
    root: str,
    model: Type[BaseModel],
    user_errors_key: str = "userErrors",
) -> StepOutcome:
    """Execute one mutation and interpret its response.

    The checks run in a fixed order: transport, top-level ``errors``,
    presence of ``data.<root>``, application ``userErrors``, and finally the
    payload shape via ``model``. On success the parsed ``model`` instance is
    returned as ``Success.value``.
    """
    try:
        raw = client.execute(document, variables)
    except TransportError as exc:
        return Failure(kind=ErrorKind.TRANSPORT_FAILURE, detail=str(exc))

    try:
        envelope = GraphQLEnvelope.model_validate(raw)
    except ValidationError as exc:
        return Failure(kind=ErrorKind.UNEXPECTED_RESPONSE_SHAPE, detail=_describe(exc, "response"))

    if envelope.errors:
        return Failure(
            kind=ErrorKind.TRANSPORT_FAILURE,
            detail="; ".join(e.message for e in envelope.errors),
        )

    payload = (envelope.data or {}).get(root)
    if not isinstance(payload, dict):
        return Failure(kind=ErrorKind.UNEXPECTED_RESPONSE_SHAPE, detail=f"response has no data.{root}")

    if payload.get(user_errors_key):
        errs = _user_errors(payload[user_errors_key])
        return Failure(
            kind=ErrorKind.REMOTE_VALIDATION,
            detail="; ".join(e.message for e in errs),
            user_errors=errs,
        )

    try:
        return Success(value=model.model_validate(payload))
    except ValidationError as exc:
        return Failure(kind=ErrorKind.UNEXPECTED_RESPONSE_SHAPE, detail=_describe(exc, root))


def log_outcome(step: str, outcome: StepOutcome) -> None:
    if isinstance(outcome, Success):
        logger.info(f"{step}: success")
    elif isinstance(outcome, NotAttempted):
        logger.info(f"{step}: not attempted ({outcome.reason})")
    else:
        logger.warning(f"{step}: {outcome.kind.value}: {outcome.detail}")
