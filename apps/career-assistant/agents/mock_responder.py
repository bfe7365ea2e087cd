from typing import Optional
from models.profile import UserProfile
from prompts.prompt_manager import PromptManager
import logging

logger = logging.getLogger(__name__)

FALLBACK_INTENT = "general_guidance"


class MockResponder:
    """
    Produces canned, profile-interpolated replies keyed by intent.

    Used when no Gemini key is configured or every API attempt failed.
    Missing profile fields render as defaults; generate() never raises
    on profile content.
    """

    def __init__(self, prompt_manager: Optional[PromptManager] = None):
        self.prompt_manager = prompt_manager or PromptManager()

    def generate(self, intent: str, user_profile: Optional[UserProfile] = None) -> str:
        """
        Render the template for an intent

        Args:
            intent: Intent tag from MetadataExtractor.detect_intent
            user_profile: Profile used for interpolation (optional)

        Returns:
            Markdown reply text
        """
        config = self.prompt_manager.get_prompt_config("mock_responses")
        templates = config["templates"]
        profile = user_profile or UserProfile()

        if intent not in templates:
            logger.debug(f"No mock template for intent '{intent}', using {FALLBACK_INTENT}")
            intent = FALLBACK_INTENT

        values = self._template_values(intent, profile, config)
        return templates[intent].format(**values)

    def _template_values(self, intent: str, profile: UserProfile, config: dict) -> dict:
        defaults = config["defaults"]
        variants = config["variants"]

        streak = profile.streak.current or 0
        skills = ", ".join(skill.name for skill in profile.skills[:3])
        goals = ", ".join(goal.title for goal in profile.career_goals[:2])
        skill_count = len(profile.skills)

        if intent == "interview_prep":
            experience = profile.profile.experience or defaults["interview_experience"]
        else:
            experience = profile.profile.experience or defaults["roadmap_experience"]

        streak_variants = variants["daily_streak"] if intent == "daily_goals" else variants["general_streak"]
        skills_variants = variants["daily_skills"] if intent == "daily_goals" else variants["job_skills"]

        return {
            "name": profile.name or defaults["name"],
            "background": profile.background or defaults["background"],
            "experience": experience,
            "streak_line": self._pick(streak_variants, streak > 0, streak=streak),
            "skills_line": self._pick(skills_variants, skill_count > 0, skills=skills),
            "goals_line": self._pick(variants["daily_goals"], bool(profile.career_goals), goals=goals),
            "skill_count_line": self._pick(variants["skill_count"], skill_count > 0, skill_count=skill_count),
        }

    @staticmethod
    def _pick(variant: dict, present: bool, **values) -> str:
        return variant["present" if present else "absent"].format(**values)
