from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.deps import client_or_501, creation_request
from channels.base import CatalogClient, TransportError
from pipeline.graph import create_product_listing
from pipeline.result import FAILED
from pipeline.state import CreationRequest

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=201)
def create(
    response: Response,
    req: CreationRequest = Depends(creation_request),
    client: CatalogClient = Depends(client_or_501),
):
    result = create_product_listing(client, req)
    if result["status"] == FAILED:
        # nothing was created; follow-up failures still answer 201
        response.status_code = 502
    return result


@router.get("")
def list_products(
    first: int = Query(10, ge=1, le=250),
    client: CatalogClient = Depends(client_or_501),
):
    try:
        return {"products": client.list_products(first)}
    except TransportError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
