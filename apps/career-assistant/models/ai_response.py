from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Literal

from models.metadata import ResponseMetadata, TokenUsage

SOURCE_GEMINI = "gemini-api"
SOURCE_MOCK = "enhanced-mock"


class AdvisorState(str, Enum):
    NO_KEY = "no_key"
    ATTEMPTING = "attempting"
    SUCCESS = "success"
    FALLBACK = "fallback"


class AIResponse(BaseModel):
    """A generated reply, before it is persisted as a ChatRecord"""
    content: str
    metadata: ResponseMetadata
    tokens: TokenUsage
    confidence: float = Field(..., ge=0.0, le=1.0)
    source: Literal["gemini-api", "enhanced-mock"]
    # States this reply passed through; diagnostic only, never serialized
    transitions: List[AdvisorState] = Field(default_factory=list, exclude=True)
