from typing import List, Optional

from pydantic import BaseModel, Field

from channels.base import GraphQLClient
from channels.operations import PRODUCT_CREATE_MEDIA
from pipeline.state import MediaAttachment, NotAttempted, OrchestrationState, StepOutcome, Success
from .envelope import log_outcome, run_operation


class _CreateMediaPayload(BaseModel):
    media: List[MediaAttachment] = Field(min_length=1)


def attach_media(client: GraphQLClient, product_id: str, image_url: Optional[str]) -> StepOutcome:
    if not image_url:
        return NotAttempted(reason="no image URL supplied")
    outcome = run_operation(
        client,
        PRODUCT_CREATE_MEDIA,
        {
            "productId": product_id,
            "media": {"mediaContentType": "IMAGE", "originalSource": image_url},
        },
        root="productCreateMedia",
        model=_CreateMediaPayload,
        user_errors_key="mediaUserErrors",
    )
    if isinstance(outcome, Success):
        return Success(value=outcome.value.media[0])
    return outcome


def attach_media_node(state: OrchestrationState, *, client: GraphQLClient) -> dict:
    outcome = attach_media(client, state.entity_id, state.request.image_url)
    log_outcome("productCreateMedia", outcome)
    return {"media_result": outcome}
