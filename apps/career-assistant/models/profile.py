from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime


class UserSkill(BaseModel):
    name: str
    level: str = "beginner"
    category: str = "general"
    added_at: Optional[datetime] = None


class CareerGoal(BaseModel):
    title: str
    description: str = ""
    priority: str = "medium"
    completed: bool = False


class Preferences(BaseModel):
    job_location: Optional[str] = None
    job_type: Optional[str] = None


class Streak(BaseModel):
    current: int = 0
    longest: int = 0
    last_activity_date: Optional[date] = None


class ProfileDetails(BaseModel):
    experience: Optional[str] = None


class UserProfile(BaseModel):
    """User profile as read from the user_profile table.

    The advisor only reads it; ChatService owns every mutation.
    """
    user_id: Optional[str] = None
    name: Optional[str] = None
    background: Optional[str] = None
    skills: List[UserSkill] = []
    career_goals: List[CareerGoal] = []
    preferences: Preferences = Field(default_factory=Preferences)
    streak: Streak = Field(default_factory=Streak)
    profile: ProfileDetails = Field(default_factory=ProfileDetails)

    class Config:
        from_attributes = True
