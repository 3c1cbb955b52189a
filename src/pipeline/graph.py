from functools import partial
from typing import Any, Dict, List, Union

from langgraph.graph import StateGraph, END
from loguru import logger

from channels.base import GraphQLClient
from .state import CreationRequest, OrchestrationState, Success
from .nodes.create_product import create_product_node
from .nodes.set_variant_price import set_variant_price_node
from .nodes.attach_collection import attach_collection_node
from .nodes.attach_media import attach_media_node
from .result import aggregate

# Leaves depend only on the created product, never on each other.
LEAF_NODES = ["set_variant_price", "attach_collection", "attach_media"]


def _route_after_create(state: OrchestrationState) -> Union[str, List[str]]:
    if isinstance(state.product_result, Success) and state.entity_id and state.variant_id:
        return LEAF_NODES
    return END


def build_graph(client: GraphQLClient):
    g = StateGraph(OrchestrationState)
    g.add_node("create_product", partial(create_product_node, client=client))
    g.add_node("set_variant_price", partial(set_variant_price_node, client=client))
    g.add_node("attach_collection", partial(attach_collection_node, client=client))
    g.add_node("attach_media", partial(attach_media_node, client=client))

    g.set_entry_point("create_product")
    g.add_conditional_edges("create_product", _route_after_create, LEAF_NODES + [END])
    for name in LEAF_NODES:
        g.add_edge(name, END)

    return g.compile()


class ProductOrchestrator:
    """Creates a product, then prices its variant, files it in a collection and
    attaches its image.

    Product creation gates everything else. The three follow-up steps run in
    the same graph superstep once the product exists; a failure in one of
    them is recorded and does not stop the others. Nothing is rolled back.
    """

    def __init__(self, client: GraphQLClient):
        self.client = client
        self._app = build_graph(client)

    def execute(self, request: CreationRequest) -> OrchestrationState:
        logger.info(f"creating product {request.title!r} in collection {request.collection_id}")
        result = self._app.invoke(OrchestrationState(request=request))
        # LangGraph may return a dict; coerce to OrchestrationState for attribute access
        return OrchestrationState(**result) if isinstance(result, dict) else result


def create_product_listing(client: GraphQLClient, request: CreationRequest) -> Dict[str, Any]:
    state = ProductOrchestrator(client).execute(request)
    out = aggregate(state)
    logger.info(f"product {out.get('productId') or '-'}: {out['status']}")
    return out
