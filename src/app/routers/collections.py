from fastapi import APIRouter, Depends, HTTPException, Query

from app.deps import client_or_501
from channels.base import CatalogClient, TransportError

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("")
def list_collections(
    first: int = Query(10, ge=1, le=250),
    client: CatalogClient = Depends(client_or_501),
):
    try:
        return {"collections": client.list_collections(first)}
    except TransportError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
