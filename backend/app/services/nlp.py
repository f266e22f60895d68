import re
from typing import Dict, List, Union

POSITIVE_KEYWORDS = [
    'thank','thanks','great','excellent','good','happy','satisfied',
    'love','wonderful','amazing','appreciate','pleased','fantastic',
    'perfect','awesome','brilliant','helpful','support','assist'
]
NEGATIVE_KEYWORDS = [
    'angry','frustrated','hate','terrible','awful','bad','worst',
    'horrible','disappointed','urgent','immediately','critical',
    'cannot access','not working','broken','issue','problem','error',
    'down','failed','blocked','unable','trouble','help','fix',
    'resolve','charged twice','billing issue','inaccessible',"doesn't work",
    'never arrived','multiple attempts','completely','affecting operations'
]
URGENCY_KEYWORDS = [
    'urgent','critical','immediate','asap','emergency','now','today',
    'immediately','highly critical','completely inaccessible','affecting operations'
]
SUPPORT_CONTEXT_HINTS = ['support','help','issue']

HIGH_PRIORITY_KEYWORDS = [
    'urgent','immediately','asap','critical','emergency','cannot access',
    'down','not working','broken','help me','system access blocked',
    'completely inaccessible','affecting operations','highly critical',
    'servers are down','immediate support','immediate correction',
    'billing issue','charged twice','cannot reset','never arrived'
]
BUSINESS_IMPACT_KEYWORDS = [
    'operations','business','server','system','production','critical',
    'affecting','impact','downtime','inaccessible'
]
TIME_KEYWORDS = ['today','now','immediate','asap','urgent','yesterday','since yesterday']
REPEATED_ISSUE_HINTS = ['multiple attempts','since yesterday']

REQUIREMENT_PATTERNS = [
    'need help with','looking for','require assistance','help me with',
    'issue with','problem with','unable to','cannot','trouble with',
    'integration','api','crm','account verification','login','password reset',
    'billing','subscription','refund','downtime','server','access'
]
SENTIMENT_INDICATORS = [
    ('frustrated', 'negative'),
    ('angry', 'negative'),
    ('disappointed', 'negative'),
    ('urgent', 'urgent'),
    ('critical', 'urgent'),
    ('immediately', 'urgent'),
    ('happy', 'positive'),
    ('satisfied', 'positive'),
    ('thank', 'positive'),
    ('highly critical', 'urgent'),
    ('affecting operations', 'business_impact'),
    ('charged twice', 'billing_issue'),
    ('never arrived', 'delivery_issue'),
    ('since yesterday', 'duration'),
    ('multiple attempts', 'repeated_issue'),
    ('servers are down', 'infrastructure'),
    ('completely inaccessible', 'severe_access_issue'),
]

PHONE_RE = re.compile(r"(?:\+?1?[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

NO_CONTACTS = 'None extracted'
GENERAL_REQUEST = 'General support request'
NEUTRAL_INQUIRY = 'Neutral inquiry'


def email_text(subject: str, body: str) -> str:
    return f"{subject} {body}"


def _occurrences(term: str, lowered: str) -> int:
    return len(re.findall(re.escape(term), lowered))


def sentiment_scores(text: str):
    """Return (positive, negative) keyword scores for text."""
    lowered = text.lower()
    positive = sum(_occurrences(w, lowered) for w in POSITIVE_KEYWORDS)
    negative: float = sum(_occurrences(w, lowered) for w in NEGATIVE_KEYWORDS)
    # urgency weighs on negative once per distinct term
    negative += 2 * sum(1 for w in URGENCY_KEYWORDS if w in lowered)
    if any(w in lowered for w in SUPPORT_CONTEXT_HINTS):
        negative += 0.5
    return positive, negative


def analyze_sentiment(text: str) -> str:
    positive, negative = sentiment_scores(text)
    if negative > positive + 1:
        return 'negative'
    if positive > negative + 1:
        return 'positive'
    # inside the +/-1 band
    return 'neutral'


def priority_score(text: str) -> int:
    lowered = text.lower()
    score = 2 * sum(1 for w in HIGH_PRIORITY_KEYWORDS if w in lowered)
    score += sum(1 for w in BUSINESS_IMPACT_KEYWORDS if w in lowered)
    score += sum(1 for w in TIME_KEYWORDS if w in lowered)
    # cumulative with the time keywords above
    if any(w in lowered for w in REPEATED_ISSUE_HINTS):
        score += 2
    return score


def detect_priority(text: str) -> str:
    return 'urgent' if priority_score(text) >= 2 else 'normal'


def _field(email, name: str) -> str:
    if isinstance(email, dict):
        return email.get(name) or ''
    return getattr(email, name, None) or ''


def extract_information(email) -> Dict[str, Union[str, List[str]]]:
    """Pull contact strings, requirement tags and sentiment indicator tags out of an email.

    Accepts an Email model or a plain mapping with sender/subject/body.
    """
    sender = _field(email, 'sender')
    text = email_text(_field(email, 'subject'), _field(email, 'body'))
    lowered = text.lower()

    phones = [m.group(0).strip() for m in PHONE_RE.finditer(text)]
    emails = EMAIL_RE.findall(text)
    contacts = [c for c in phones + emails if c != sender]

    requirements = [p for p in REQUIREMENT_PATTERNS if p in lowered]
    indicators = [f"{p} ({tag})" for p, tag in SENTIMENT_INDICATORS if p in lowered]
    return {
        'contact_details': ', '.join(contacts) or NO_CONTACTS,
        'requirements': requirements or [GENERAL_REQUEST],
        'sentiment_indicators': indicators or [NEUTRAL_INQUIRY],
    }
