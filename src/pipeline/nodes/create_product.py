from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from channels.base import GraphQLClient
from channels.operations import PRODUCT_CREATE
from pipeline.state import CreatedProduct, OrchestrationState, StepOutcome, Success
from .envelope import log_outcome, run_operation


class _VariantNode(BaseModel):
    id: str = Field(min_length=1)
    price: Optional[str] = None


class _VariantEdge(BaseModel):
    node: _VariantNode


class _VariantConnection(BaseModel):
    # the product must come back with its implicit first variant
    edges: List[_VariantEdge] = Field(min_length=1)


class _Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    title: Optional[str] = None
    description_html: Optional[str] = Field(None, alias="descriptionHtml")
    variants: _VariantConnection


class _ProductCreatePayload(BaseModel):
    product: _Product


def create_product(client: GraphQLClient, title: str, description_html: str) -> StepOutcome:
    outcome = run_operation(
        client,
        PRODUCT_CREATE,
        {"input": {"title": title, "descriptionHtml": description_html}},
        root="productCreate",
        model=_ProductCreatePayload,
    )
    if not isinstance(outcome, Success):
        return outcome
    product = outcome.value.product
    variant = product.variants.edges[0].node
    return Success(value=CreatedProduct(
        id=product.id,
        title=product.title or "",
        description_html=product.description_html or "",
        variant_id=variant.id,
        variant_price=variant.price,
    ))


def create_product_node(state: OrchestrationState, *, client: GraphQLClient) -> dict:
    req = state.request
    outcome = create_product(client, req.title, req.description_html)
    log_outcome("productCreate", outcome)
    update = {"product_result": outcome}
    if isinstance(outcome, Success):
        update["entity_id"] = outcome.value.id
        update["variant_id"] = outcome.value.variant_id
    return update
