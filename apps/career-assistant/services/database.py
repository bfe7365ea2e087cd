from supabase import create_client, Client
from config import Settings, settings as default_settings
from typing import List, Optional, Tuple
from models.chat import ChatRecord, ChatSessionSummary
from models.profile import UserProfile
import logging

logger = logging.getLogger(__name__)

SESSION_PREVIEW_CHARS = 100
SESSION_SCAN_LIMIT = 1000


class DatabaseError(Exception):
    """A Supabase read or write failed"""


class DatabaseService:
    def __init__(self, client: Optional[Client] = None, config: Optional[Settings] = None):
        if client is not None:
            self.client = client
            return

        config = config or default_settings
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
            raise DatabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        self.client: Client = create_client(
            config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY
        )

    # Chat Messages
    def create_chat_message(self, record: ChatRecord) -> ChatRecord:
        """Insert a chat message, return it with its id and created_at"""
        data = record.model_dump(mode="json", exclude_none=True)
        try:
            response = self.client.table("chat_message").insert(data).execute()
            return ChatRecord(**response.data[0])
        except Exception as e:
            logger.error(f"Error creating chat message: {e}")
            raise DatabaseError(f"Error creating chat message: {e}") from e

    def get_recent_session_messages(
        self, user_id: str, session_id: str, limit: int = 10
    ) -> List[ChatRecord]:
        """Most recent messages of a session, returned oldest first"""
        try:
            response = (
                self.client.table("chat_message")
                .select("*")
                .eq("user_id", user_id)
                .eq("session_id", session_id)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching session messages: {e}")
            raise DatabaseError(f"Error fetching session messages: {e}") from e

        return list(reversed([ChatRecord(**m) for m in response.data or []]))

    def get_session_history(
        self, user_id: str, session_id: str, page: int = 1, limit: int = 50
    ) -> Tuple[List[ChatRecord], int]:
        """One page of a session, oldest first, plus the session's total count"""
        start = (page - 1) * limit
        try:
            response = (
                self.client.table("chat_message")
                .select("*", count="exact")
                .eq("user_id", user_id)
                .eq("session_id", session_id)
                .order("created_at", desc=False)
                .range(start, start + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching chat history: {e}")
            raise DatabaseError(f"Error fetching chat history: {e}") from e

        messages = [ChatRecord(**m) for m in response.data or []]
        total = response.count if response.count is not None else len(messages)
        return messages, total

    def get_chat_sessions(self, user_id: str, limit: int = 20) -> List[ChatSessionSummary]:
        """Sessions ordered by last activity, newest first"""
        try:
            response = (
                self.client.table("chat_message")
                .select("session_id, content, created_at")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .limit(SESSION_SCAN_LIMIT)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching chat sessions: {e}")
            raise DatabaseError(f"Error fetching chat sessions: {e}") from e

        return summarize_sessions(response.data or [], limit)

    # User Profiles
    def get_user_profile(self, user_id: str) -> UserProfile:
        """Get profile by user id; a user without a row gets an empty profile"""
        try:
            response = (
                self.client.table("user_profile")
                .select("*")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                return UserProfile(user_id=user_id)

            # Null columns (rows created by a partial upsert) take model defaults
            row = {k: v for k, v in response.data[0].items() if v is not None}
            return UserProfile(**row)
        except Exception as e:
            logger.error(f"Error fetching user profile: {e}")
            raise DatabaseError(f"Error fetching user profile: {e}") from e

    def save_user_profile(self, profile: UserProfile):
        """Upsert the mutable parts of a profile"""
        data = profile.model_dump(
            mode="json",
            include={"user_id", "skills", "career_goals", "streak"},
        )
        try:
            self.client.table("user_profile").upsert(data, on_conflict="user_id").execute()
        except Exception as e:
            logger.error(f"Error saving user profile: {e}")
            raise DatabaseError(f"Error saving user profile: {e}") from e


def summarize_sessions(rows: List[dict], limit: int = 20) -> List[ChatSessionSummary]:
    """Group message rows (newest first) into per-session summaries

    Args:
        rows: Dicts with session_id, content and created_at, newest first
        limit: Maximum number of sessions to return

    Returns:
        Summaries ordered by last activity, newest first
    """
    sessions = {}

    for row in rows:
        session_id = row["session_id"]
        if session_id not in sessions:
            content = row.get("content") or ""
            preview = content[:SESSION_PREVIEW_CHARS]
            if len(content) > SESSION_PREVIEW_CHARS:
                preview += "..."
            sessions[session_id] = {
                "session_id": session_id,
                "last_message": preview,
                "last_activity": row.get("created_at"),
                "message_count": 0,
            }
        sessions[session_id]["message_count"] += 1

    # Insertion order already follows newest activity first
    return [ChatSessionSummary(**s) for s in list(sessions.values())[:limit]]
