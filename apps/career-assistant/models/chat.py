"""
Chat models for the career assistant conversational interface.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime
import time

from models.metadata import ResponseMetadata, TokenUsage
from models.profile import UserProfile

MAX_MESSAGE_LENGTH = 2000


class ChatMessage(BaseModel):
    """Single chat message as seen by the prompt builder."""
    role: Literal["user", "assistant"]
    content: str


class ChatRecord(BaseModel):
    """A chat message as stored in the chat_message table."""
    id: Optional[str] = None
    user_id: str
    session_id: str
    content: str
    role: Literal["user", "assistant"]
    metadata: Optional[ResponseMetadata] = None
    tokens: Optional[TokenUsage] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Message content cannot be empty")
        return value

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class SessionContext(BaseModel):
    """What is known about the conversation so far."""
    topics: List[str] = []
    intent: Optional[str] = None
    stage: Optional[str] = None


class ChatContext(BaseModel):
    """Everything the advisor may use besides the message itself.

    Every field has a default, so ChatContext() is a valid empty context.
    """
    chat_history: List[ChatMessage] = []
    user_profile: UserProfile = Field(default_factory=UserProfile)
    session_context: SessionContext = Field(default_factory=SessionContext)


def new_session_id() -> str:
    return f"session_{int(time.time() * 1000)}"


class ChatRequest(BaseModel):
    """Request to send a message to the assistant."""
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    session_id: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, value):
        return value.strip() if isinstance(value, str) else value


class ChatReply(BaseModel):
    """The assistant message returned to the client."""
    id: Optional[str] = None
    content: str
    role: str
    timestamp: Optional[datetime] = None
    session_id: str


class ChatResponse(BaseModel):
    """Response for a processed chat message."""
    message: str = "Message processed successfully"
    response: ChatReply
    metadata: ResponseMetadata
    source: str


class ChatSessionSummary(BaseModel):
    """One row of the session list."""
    session_id: str
    last_message: str
    last_activity: Optional[datetime] = None
    message_count: int
