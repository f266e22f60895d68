from fastapi import APIRouter, Depends

from ..services.counters import analytics_summary
from ..services.kv_store import KVStore, get_store

router = APIRouter()

@router.get("/")
def analytics(store: KVStore = Depends(get_store)):
    return {"analytics": analytics_summary(store).model_dump()}
