from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from ..schemas.email import EmailCreate, StatusUpdate, ResponseUpdate
from ..services.kv_store import KVStore, get_store
from ..services.email_service import (
    process_email,
    require_fields,
    list_emails as list_stored_emails,
    get_email,
    update_status,
    update_response,
)
from ..services.dataset_loader import dataset_path, load_dataset

router = APIRouter()


def _normalize(value: Optional[str]) -> Optional[str]:
    # filter values match case-insensitively
    if not value:
        return None
    return value.strip().lower()


@router.get("/")
def list_emails(
    store: KVStore = Depends(get_store),
    status: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    sentiment: Optional[str] = Query(None),
):
    emails = list_stored_emails(
        store,
        status=_normalize(status),
        priority=_normalize(priority),
        sentiment=_normalize(sentiment),
    )
    return {"emails": [e.model_dump(mode='json') for e in emails], "total": len(emails)}


@router.post("/init-sample-data")
def init_sample_data(store: KVStore = Depends(get_store)):
    """Wipe every stored email and reload the configured dataset through the processor."""
    try:
        summary = load_dataset(store, dataset_path(), wipe=True)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Dataset file not found")
    summary.pop("path", None)
    return {"message": "Sample data initialized successfully", "emails": summary["loaded"], "summary": summary}


@router.post("/")
def create_email(payload: EmailCreate, store: KVStore = Depends(get_store)):
    require_fields(payload)
    email = process_email(payload, store)
    return {"email": email.model_dump(mode='json'), "message": "Email processed successfully"}


@router.get("/{email_id}")
def get_single_email(email_id: str, store: KVStore = Depends(get_store)):
    return {"email": get_email(store, email_id).model_dump(mode='json')}


@router.put("/{email_id}/status")
def set_status(email_id: str, payload: StatusUpdate, store: KVStore = Depends(get_store)):
    email = update_status(store, email_id, payload.status)
    return {"email": email.model_dump(mode='json'), "message": "Email status updated successfully"}


@router.put("/{email_id}/response")
def set_response(email_id: str, payload: ResponseUpdate, store: KVStore = Depends(get_store)):
    email = update_response(store, email_id, payload.ai_response)
    return {"email": email.model_dump(mode='json'), "message": "AI response updated successfully"}
