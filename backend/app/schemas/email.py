from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List, Literal, Union

Sentiment = Literal['positive', 'negative', 'neutral']
Priority = Literal['urgent', 'normal']
Status = Literal['pending', 'responded', 'resolved']

STATUSES = ('pending', 'responded', 'resolved')
SENTIMENTS = ('positive', 'negative', 'neutral')
PRIORITIES = ('urgent', 'normal')

class ExtractedInfo(BaseModel):
    contact_details: Optional[str] = None
    requirements: List[str] = []
    sentiment_indicators: List[str] = []

class EmailCreate(BaseModel):
    sender: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    # ISO-8601 or RFC 2822 text, or a datetime; coerced during processing
    sent_date: Optional[Union[datetime, str]] = None

class Email(BaseModel):
    id: str
    sender: str
    subject: str
    body: str
    sent_date: datetime
    sentiment: Sentiment
    priority: Priority
    category: str
    ai_response: str = ''
    status: Status = 'pending'
    extracted_info: ExtractedInfo = ExtractedInfo()

class StatusUpdate(BaseModel):
    status: str

class ResponseUpdate(BaseModel):
    ai_response: str

class SentimentCounts(BaseModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0

class PriorityCounts(BaseModel):
    urgent: int = 0
    normal: int = 0

class DailyStats(BaseModel):
    total: int = 0
    pending: int = 0
    resolved: int = 0
    sentiment: SentimentCounts = SentimentCounts()
    priority: PriorityCounts = PriorityCounts()

class Comparison(BaseModel):
    totalChange: float = 0.0

class Analytics(BaseModel):
    today: DailyStats
    comparison: Comparison
