from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class Testament(str, Enum):
    OLD = "old"
    NEW = "new"


class Emotion(str, Enum):
    SAD = "sad"
    ANXIOUS = "anxious"
    ANGRY = "angry"
    HOPEFUL = "hopeful"
    GRATEFUL = "grateful"
    CONFUSED = "confused"
    LONELY = "lonely"
    PEACEFUL = "peaceful"


class CounselingTopic(str, Enum):
    RELATIONSHIP = "relationship"
    FAMILY = "family"
    WORK = "work"
    HEALTH = "health"
    FINANCIAL = "financial"
    FAITH = "faith"
    DECISION = "decision"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ParsedReference(BaseModel):
    book_abbr: str
    book: str
    chapter: int = Field(..., ge=1)
    verse: int = Field(..., ge=1)
    testament: Testament


class VerseClassification(BaseModel):
    keywords: List[str] = Field(default_factory=list)
    themes: List[str] = Field(default_factory=list)
    category: str = "other"
    search_text: str = ""


class VerseRead(BaseModel):
    """Public projection of a stored verse."""
    model_config = ConfigDict(from_attributes=True)

    reference: str
    text: str
    book: str
    chapter: int
    verse: int
    themes: List[str] = Field(default_factory=list)
    category: str
    testament: Optional[Testament] = None
    usage_count: int = 0
    last_used: Optional[datetime] = None


class CounselingContext(BaseModel):
    """What the chat and prayer flows know when they ask for verses."""
    session_history: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    emotion: str = "neutral"
    counseling_stage: str = "exploration"
