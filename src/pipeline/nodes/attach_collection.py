from pydantic import BaseModel

from channels.base import GraphQLClient
from channels.operations import COLLECTION_ADD_PRODUCTS
from pipeline.state import CollectionAttachment, OrchestrationState, StepOutcome, Success
from .envelope import log_outcome, run_operation


class _CollectionAddPayload(BaseModel):
    collection: CollectionAttachment


def attach_collection(client: GraphQLClient, collection_id: str, product_id: str) -> StepOutcome:
    outcome = run_operation(
        client,
        COLLECTION_ADD_PRODUCTS,
        {"id": collection_id, "productIds": [product_id]},
        root="collectionAddProducts",
        model=_CollectionAddPayload,
    )
    if isinstance(outcome, Success):
        return Success(value=outcome.value.collection)
    return outcome


def attach_collection_node(state: OrchestrationState, *, client: GraphQLClient) -> dict:
    outcome = attach_collection(client, state.request.collection_id, state.entity_id)
    log_outcome("collectionAddProducts", outcome)
    return {"collection_result": outcome}
