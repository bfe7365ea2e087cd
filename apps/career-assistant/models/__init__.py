# Models module - Pydantic models for chat, profile and AI response data
from models.metadata import ExtractedSkill, ResponseMetadata, TokenUsage
from models.profile import (
    UserProfile,
    UserSkill,
    CareerGoal,
    Preferences,
    Streak,
    ProfileDetails,
)
from models.chat import (
    ChatMessage,
    ChatRecord,
    ChatContext,
    SessionContext,
    ChatRequest,
    ChatReply,
    ChatResponse,
    ChatSessionSummary,
)
from models.ai_response import AIResponse

__all__ = [
    "ExtractedSkill",
    "ResponseMetadata",
    "TokenUsage",
    "UserProfile",
    "UserSkill",
    "CareerGoal",
    "Preferences",
    "Streak",
    "ProfileDetails",
    "ChatMessage",
    "ChatRecord",
    "ChatContext",
    "SessionContext",
    "ChatRequest",
    "ChatReply",
    "ChatResponse",
    "ChatSessionSummary",
    "AIResponse",
]
