from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union
from models.metadata import ExtractedSkill
from models.profile import CareerGoal, UserProfile, UserSkill
import logging

logger = logging.getLogger(__name__)

CHAT_GOAL_DESCRIPTION = "Goal identified from chat conversation"


class ProfileUpdater:
    """Merges what the extractor found into a user profile.

    Names and titles are deduplicated case-insensitively against the
    profile and within the incoming batch. Methods mutate the profile in
    place and return only what was added.
    """

    @staticmethod
    def merge_skills(
        profile: UserProfile,
        extracted: Iterable[Union[ExtractedSkill, str]]
    ) -> List[UserSkill]:
        existing = {skill.name.lower() for skill in profile.skills}
        added = []

        for item in extracted:
            if isinstance(item, ExtractedSkill):
                name, category = item.name, item.category
            else:
                name, category = str(item), "general"

            key = name.strip().lower()
            if not key or key in existing:
                continue

            skill = UserSkill(
                name=name.strip(),
                level="beginner",
                category=category,
                added_at=datetime.now(timezone.utc),
            )
            profile.skills.append(skill)
            existing.add(key)
            added.append(skill)

        if added:
            logger.info(f"Added {len(added)} skills from chat: {[s.name for s in added]}")

        return added

    @staticmethod
    def merge_goals(profile: UserProfile, goals: Iterable[str]) -> List[CareerGoal]:
        existing = {goal.title.lower() for goal in profile.career_goals}
        added = []

        for title in goals:
            key = title.strip().lower()
            if not key or key in existing:
                continue

            goal = CareerGoal(
                title=title.strip(),
                description=CHAT_GOAL_DESCRIPTION,
                priority="medium",
                completed=False,
            )
            profile.career_goals.append(goal)
            existing.add(key)
            added.append(goal)

        if added:
            logger.info(f"Added {len(added)} goals from chat: {[g.title for g in added]}")

        return added

    @staticmethod
    def update_streak(profile: UserProfile, today: Optional[date] = None) -> bool:
        """Advance the daily learning streak

        Args:
            profile: Profile to update
            today: Activity date (defaults to the current UTC date)

        Returns:
            True if the streak changed

        Rules:
        - Activity already recorded today: no change
        - Last activity yesterday: current + 1
        - Otherwise: current restarts at 1
        """
        today = today or datetime.now(timezone.utc).date()
        streak = profile.streak
        last = streak.last_activity_date

        if last == today:
            return False

        if last is not None and last == today - timedelta(days=1):
            streak.current += 1
        else:
            streak.current = 1

        streak.longest = max(streak.longest, streak.current)
        streak.last_activity_date = today
        return True
