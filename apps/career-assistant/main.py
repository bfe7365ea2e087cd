from fastapi import Depends, FastAPI, Header, HTTPException
from functools import lru_cache
from typing import Optional
from config import settings
from agents.career_advisor import CareerAdvisor, build_career_advisor
from models.chat import ChatRequest
from services.chat_service import ChatService
from services.database import DatabaseService
import logging
import math

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Career Assistant",
    version="0.1.0",
    description="Career guidance chat backed by Gemini, with mock fallback"
)


@lru_cache
def get_database() -> DatabaseService:
    return DatabaseService()


@lru_cache
def get_advisor() -> CareerAdvisor:
    return build_career_advisor(settings)


def get_chat_service(
    db: DatabaseService = Depends(get_database),
    advisor: CareerAdvisor = Depends(get_advisor),
) -> ChatService:
    return ChatService(db=db, advisor=advisor, history_limit=settings.CHAT_HISTORY_LIMIT)


def get_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """Caller identity; authentication happens upstream of this service"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id


def _error_detail(message: str, error: Exception) -> dict:
    detail = {"message": message}
    if settings.ENVIRONMENT == "development":
        detail["error"] = str(error)
    return detail


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "service": "Career Assistant",
        "gemini_configured": bool(settings.GEMINI_API_KEY)
    }


@app.post("/chat/message")
def send_message(
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    chat_service: ChatService = Depends(get_chat_service),
):
    """Send a message to the career assistant

    Args:
        request: { "content": str (1-2000 chars), "session_id": str (optional) }

    Returns:
        {
            "message": str,
            "response": {"id", "content", "role", "timestamp", "session_id"},
            "metadata": {...},
            "source": "gemini-api" | "enhanced-mock"
        }
    """
    try:
        response = chat_service.handle_message(
            user_id=user_id,
            content=request.content,
            session_id=request.session_id
        )
        return response.model_dump(mode="json")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Chat message error: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=_error_detail("Error processing chat message", e)
        )


@app.get("/chat/history/{session_id}")
def get_chat_history(
    session_id: str,
    page: int = 1,
    limit: int = 50,
    user_id: str = Depends(get_user_id),
    db: DatabaseService = Depends(get_database),
):
    """Get one page of a session's messages, oldest first"""
    if page < 1 or limit < 1:
        raise HTTPException(status_code=400, detail="page and limit must be positive")

    try:
        messages, total = db.get_session_history(user_id, session_id, page=page, limit=limit)
        return {
            "messages": [
                {
                    "id": msg.id,
                    "content": msg.content,
                    "role": msg.role,
                    "timestamp": msg.created_at.isoformat() if msg.created_at else None,
                    "metadata": msg.metadata.model_dump(mode="json") if msg.metadata else None
                }
                for msg in messages
            ],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit)
            }
        }
    except Exception as e:
        logger.error(f"Get chat history error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching chat history")


@app.get("/chat/sessions")
def get_chat_sessions(
    user_id: str = Depends(get_user_id),
    db: DatabaseService = Depends(get_database),
):
    """Get the user's 20 most recently active sessions"""
    try:
        sessions = db.get_chat_sessions(user_id, limit=20)
        return {"sessions": [s.model_dump(mode="json") for s in sessions]}
    except Exception as e:
        logger.error(f"Get chat sessions error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching chat sessions")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
