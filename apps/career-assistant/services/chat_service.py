from typing import Optional
from datetime import date
from agents.career_advisor import CareerAdvisor
from models.ai_response import AIResponse
from models.chat import (
    ChatContext,
    ChatRecord,
    ChatReply,
    ChatResponse,
    new_session_id,
)
from models.profile import UserProfile
from services.database import DatabaseService
from services.profile_updater import ProfileUpdater
import logging

logger = logging.getLogger(__name__)

# Shorter messages do not count towards the learning streak
MEANINGFUL_MESSAGE_LENGTH = 10


class ChatService:
    """
    Runs one chat turn end to end:
    persist user message -> load history and profile -> generate reply ->
    persist reply -> update streak, skills and goals.
    """

    def __init__(
        self,
        db: DatabaseService,
        advisor: CareerAdvisor,
        history_limit: int = 10,
    ):
        self.db = db
        self.advisor = advisor
        self.history_limit = history_limit

    def handle_message(
        self,
        user_id: str,
        content: str,
        session_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ChatResponse:
        """
        Process a user chat message

        Args:
            user_id: Authenticated user id
            content: Message text (already validated, 1..2000 chars)
            session_id: Conversation id; a new one is generated if missing
            today: Date used for the streak (defaults to today, UTC)

        Returns:
            ChatResponse with the saved assistant message and its metadata
        """
        session_id = session_id or new_session_id()
        logger.info(f"Processing chat message for session {session_id}: {content[:50]}...")

        user_message = self.db.create_chat_message(ChatRecord(
            user_id=user_id,
            session_id=session_id,
            content=content,
            role="user",
        ))

        history = self.db.get_recent_session_messages(
            user_id, session_id, limit=self.history_limit
        )
        chat_history = [
            msg.to_chat_message() for msg in history
            if user_message.id is None or msg.id != user_message.id
        ]
        if user_message.id is None and chat_history:
            # Without ids, the message just saved is the newest one
            chat_history = chat_history[:-1]

        profile = self.db.get_user_profile(user_id)

        ai_response = self.advisor.generate_response(
            content,
            ChatContext(chat_history=chat_history, user_profile=profile)
        )

        assistant_message = self.db.create_chat_message(ChatRecord(
            user_id=user_id,
            session_id=session_id,
            content=ai_response.content,
            role="assistant",
            metadata=ai_response.metadata,
            tokens=ai_response.tokens,
        ))

        self._update_profile(profile, content, ai_response, today)

        logger.info(
            f"Chat response generated from {ai_response.source} "
            f"(intent={ai_response.metadata.intent}, confidence={ai_response.confidence})"
        )

        return ChatResponse(
            response=ChatReply(
                id=assistant_message.id,
                content=assistant_message.content,
                role=assistant_message.role,
                timestamp=assistant_message.created_at,
                session_id=session_id,
            ),
            metadata=ai_response.metadata,
            source=ai_response.source,
        )

    def _update_profile(
        self,
        profile: UserProfile,
        content: str,
        ai_response: AIResponse,
        today: Optional[date] = None,
    ) -> bool:
        """Apply streak, skill and goal updates; failures never fail the turn"""
        try:
            changed = False

            if len(content) > MEANINGFUL_MESSAGE_LENGTH:
                changed = ProfileUpdater.update_streak(profile, today) or changed

            metadata = ai_response.metadata
            if metadata.extracted_skills:
                changed = bool(ProfileUpdater.merge_skills(profile, metadata.extracted_skills)) or changed
            if metadata.extracted_goals:
                changed = bool(ProfileUpdater.merge_goals(profile, metadata.extracted_goals)) or changed

            if changed:
                self.db.save_user_profile(profile)

            return changed

        except Exception as e:
            logger.error(f"Error updating user profile from chat: {e}", exc_info=True)
            return False
