from fastapi import APIRouter

from channels.base import shopify_configured

router = APIRouter()


@router.get("/")
def healthcheck():
    # reports configuration only; does not call Shopify
    return {"ok": True, "shopify_configured": shopify_configured()}
