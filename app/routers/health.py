from fastapi import APIRouter, Depends
from app.core.state import Marketplace, get_marketplace

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(mp: Marketplace = Depends(get_marketplace)):
    return {"ok": True, "store_mode": mp.store.mode, "app_id": mp.settings.APP_ID}
