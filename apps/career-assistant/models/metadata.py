from pydantic import BaseModel, Field
from typing import List, Literal


class ExtractedSkill(BaseModel):
    name: str
    category: str


class TokenUsage(BaseModel):
    input: int = Field(0, ge=0)
    output: int = Field(0, ge=0)


class ResponseMetadata(BaseModel):
    """Heuristic annotations attached to assistant messages"""
    extracted_skills: List[ExtractedSkill] = []
    extracted_goals: List[str] = []
    extracted_tools: List[str] = []  # Never populated, kept for stored-document shape
    extracted_certifications: List[str] = []
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    confidence: float = Field(0.8, ge=0.0, le=1.0)
    intent: str = "general_guidance"
    topics: List[str] = []
    action_items: List[str] = Field(default_factory=list, max_length=5)
    urgency: Literal["low", "medium", "high"] = "low"
    # Profile-declared experience is passed through verbatim
    experience_level: str = "intermediate"
