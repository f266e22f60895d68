import logging
import uuid
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel

from ..core.errors import NotFoundError, ValidationError
from ..schemas.email import Email, ExtractedInfo, STATUSES
from .auto_responder import generate_ai_response
from .counters import record_closed, record_created
from .kv_store import KVStore
from .nlp import analyze_sentiment, detect_priority, email_text, extract_information
from .priority_queue import EmailPriorityQueue

log = logging.getLogger(__name__)

EMAIL_PREFIX = 'email:'
REQUIRED_FIELDS = ('sender', 'subject', 'body')
CLOSING_STATUSES = ('responded', 'resolved')


def email_key(email_id: str) -> str:
    return f"{EMAIL_PREFIX}{email_id}"


def category_for(priority: str) -> str:
    return 'High Priority Support' if priority == 'urgent' else 'General Support'


def _as_mapping(raw) -> Mapping[str, Any]:
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    return raw or {}


def _coerce_sent_date(value, now: datetime) -> datetime:
    dt = None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            dt = datetime.fromisoformat(raw.replace('Z', '+00:00'))
        except ValueError:
            try:
                dt = parsedate_to_datetime(raw)
            except (TypeError, ValueError):
                dt = None
    if dt is None:
        return now
    # Treat naive as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def require_fields(raw) -> None:
    """Boundary check: sender, subject and body must all be present and non-empty."""
    data = _as_mapping(raw)
    if not all(data.get(f) for f in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields: sender, subject, body")


def process_email(raw, store: KVStore, now: Optional[datetime] = None) -> Email:
    """Classify, extract, draft a reply for, persist and count one incoming email.

    Missing sender/subject/body are treated as empty strings; callers that need the
    strict contract run require_fields first.
    """
    data = _as_mapping(raw)
    now = now or datetime.now(timezone.utc)
    email_id = str(uuid.uuid4())
    sender = data.get('sender') or ''
    subject = data.get('subject') or ''
    body = data.get('body') or ''

    text = email_text(subject, body)
    sentiment = analyze_sentiment(text)
    priority = detect_priority(text)

    email = Email(
        id=email_id,
        sender=sender,
        subject=subject,
        body=body,
        sent_date=_coerce_sent_date(data.get('sent_date'), now),
        sentiment=sentiment,
        priority=priority,
        category=category_for(priority),
        status='pending',
    )
    email.extracted_info = ExtractedInfo(**extract_information(email))
    email.ai_response = generate_ai_response(email)

    store.set(email_key(email_id), email.model_dump(mode='json'))
    record_created(store, sentiment, priority, now)
    log.info("email_processed", extra={"email_id": email_id, "sentiment": sentiment, "priority": priority})
    return email


def _load(value) -> Email:
    return Email.model_validate(value)


def get_email(store: KVStore, email_id: str) -> Email:
    value = store.get(email_key(email_id))
    if value is None:
        raise NotFoundError(email_id)
    return _load(value)


def list_emails(
    store: KVStore,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    sentiment: Optional[str] = None,
) -> List[Email]:
    """All stored emails, urgent first, then newest sent_date, ties in insertion order."""
    queue = EmailPriorityQueue()
    for value in store.get_by_prefix(EMAIL_PREFIX):
        email = _load(value)
        if status and email.status != status:
            continue
        if priority and email.priority != priority:
            continue
        if sentiment and email.sentiment != sentiment:
            continue
        queue.push(email.id, email.priority, email.sent_date, email)
    return [item.data for item in queue]


def update_status(store: KVStore, email_id: str, status: str, now: Optional[datetime] = None) -> Email:
    if status not in STATUSES:
        raise ValidationError(f"Invalid status: {status!r} (use one of {', '.join(STATUSES)})")
    email = get_email(store, email_id)
    email.status = status
    store.set(email_key(email_id), email.model_dump(mode='json'))
    # fires on every closing call, even when the email was already closed
    if status in CLOSING_STATUSES:
        record_closed(store, now)
    log.info("email_status_updated", extra={"email_id": email_id, "status": status})
    return email


def update_response(store: KVStore, email_id: str, ai_response: str) -> Email:
    email = get_email(store, email_id)
    email.ai_response = ai_response
    store.set(email_key(email_id), email.model_dump(mode='json'))
    log.info("email_response_updated", extra={"email_id": email_id})
    return email


def wipe_emails(store: KVStore) -> int:
    """Delete every stored email record. Counters are left untouched."""
    existing = [_load(v) for v in store.get_by_prefix(EMAIL_PREFIX)]
    store.mdel([email_key(e.id) for e in existing])
    return len(existing)


def count_emails(store: KVStore) -> int:
    return store.count_prefix(EMAIL_PREFIX)
