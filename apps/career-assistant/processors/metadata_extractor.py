from pathlib import Path
from typing import Any, Dict, List, Optional
from models.metadata import ExtractedSkill, ResponseMetadata
from models.profile import UserProfile
import logging
import re
import yaml

logger = logging.getLogger(__name__)

KEYWORD_TABLES_PATH = Path(__file__).parent / "keyword_tables.yaml"

# Applied to the user message only; a capture is kept if 3 < len < 50
GOAL_PATTERNS = [
    re.compile(r"become\s+(?:a\s+)?(.+?)(?:\s|$|,|\.|!|\?)", re.IGNORECASE),
    re.compile(r"want\s+to\s+(?:be\s+)?(.+?)(?:\s|$|,|\.|!|\?)", re.IGNORECASE),
    re.compile(r"transition\s+(?:to\s+|into\s+)(.+?)(?:\s|$|,|\.|!|\?)", re.IGNORECASE),
    re.compile(r"career\s+in\s+(.+?)(?:\s|$|,|\.|!|\?)", re.IGNORECASE),
]

# Applied to the AI text only, in this order; a span is kept if 10 < len < 100
ACTION_PATTERNS = [
    re.compile(r"(?:^|\n)[-*]\s*(.+?)(?:\n|$)"),
    re.compile(r"(?:^|\n)\d+\.\s*(.+?)(?:\n|$)"),
    re.compile(
        r"(?:start|begin|learn|practice|build|create|apply|study)\s+(.+?)(?:\.|,|\n|$)",
        re.IGNORECASE,
    ),
]

MAX_ACTION_ITEMS = 5


def load_keyword_tables(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the versioned keyword tables from YAML

    Args:
        path: Alternate tables file (defaults to keyword_tables.yaml next to this module)

    Returns:
        Dictionary of tables keyed by table name
    """
    path = Path(path) if path else KEYWORD_TABLES_PATH
    with open(path, "r", encoding="utf-8") as f:
        tables = yaml.safe_load(f)

    logger.debug(f"Loaded keyword tables v{tables.get('version')} from {path}")
    return tables


class MetadataExtractor:
    """Derives intent, sentiment, topics, skills, goals and action items
    from a user message and the reply generated for it.

    Every rule is a case-insensitive substring or regex match. Rule order
    is significant and comes from the keyword tables.
    """

    def __init__(self, tables: Optional[Dict[str, Any]] = None):
        self.tables = tables or load_keyword_tables()
        self.version = self.tables.get("version")

    def extract(
        self,
        user_message: str,
        ai_text: str,
        user_profile: Optional[UserProfile] = None
    ) -> ResponseMetadata:
        """Build the full metadata record for one exchange

        Args:
            user_message: What the user wrote
            ai_text: The generated (or mock) reply
            user_profile: Optional profile; a declared experience level wins

        Returns:
            ResponseMetadata
        """
        combined_text = f"{user_message} {ai_text}".lower()

        return ResponseMetadata(
            extracted_skills=self.extract_skills(combined_text),
            extracted_goals=self.extract_goals(user_message),
            extracted_tools=[],
            extracted_certifications=self.extract_certifications(combined_text),
            sentiment=self.detect_sentiment(combined_text),
            confidence=0.8,
            intent=self.detect_intent(user_message),
            topics=self.extract_topics(combined_text),
            action_items=self.extract_action_items(ai_text),
            urgency=self.detect_urgency(user_message),
            experience_level=self.detect_experience_level(user_message, user_profile),
        )

    def detect_intent(self, message: str) -> str:
        """First matching intent rule wins"""
        lower_message = message.lower()

        for rule in self.tables["intent_rules"]:
            if all(
                any(phrase in lower_message for phrase in group)
                for group in rule["all"]
            ):
                return rule["intent"]

        return self.tables["default_intent"]

    def extract_skills(self, combined_text: str) -> List[ExtractedSkill]:
        """One entry per keyword hit; the same name may appear under two categories"""
        combined_text = combined_text.lower()
        skills = []

        for category, keywords in self.tables["skill_categories"].items():
            for keyword in keywords:
                if keyword in combined_text:
                    skills.append(ExtractedSkill(name=keyword, category=category))

        return skills

    def extract_goals(self, user_message: str) -> List[str]:
        goals = []

        for pattern in GOAL_PATTERNS:
            for match in pattern.finditer(user_message):
                goal = match.group(1).strip()
                if 3 < len(goal) < 50:
                    goals.append(goal)

        return goals

    def extract_certifications(self, combined_text: str) -> List[str]:
        combined_text = combined_text.lower()
        return [cert for cert in self.tables["certifications"] if cert in combined_text]

    def detect_sentiment(self, combined_text: str) -> str:
        """Majority of keyword hits; ties and no hits resolve to neutral

        Each keyword counts at most once however often it appears.
        """
        combined_text = combined_text.lower()
        words = self.tables["sentiment"]

        positive_count = sum(1 for word in words["positive"] if word in combined_text)
        negative_count = sum(1 for word in words["negative"] if word in combined_text)
        neutral_count = sum(1 for word in words["neutral"] if word in combined_text)
        logger.debug(
            f"Sentiment hits: positive={positive_count}, negative={negative_count}, neutral={neutral_count}"
        )

        if positive_count > negative_count and positive_count > 0:
            return "positive"
        if negative_count > positive_count and negative_count > 0:
            return "negative"
        return "neutral"

    def extract_topics(self, combined_text: str) -> List[str]:
        combined_text = combined_text.lower()
        return [
            topic
            for topic, keywords in self.tables["topics"].items()
            if any(keyword in combined_text for keyword in keywords)
        ]

    def extract_action_items(self, ai_text: str) -> List[str]:
        """Bullets, then numbered lines, then imperative phrases; first 5 kept"""
        action_items = []

        for pattern in ACTION_PATTERNS:
            for match in pattern.finditer(ai_text):
                action = match.group(1).strip()
                if 10 < len(action) < 100:
                    action_items.append(action)

        return action_items[:MAX_ACTION_ITEMS]

    def detect_urgency(self, message: str) -> str:
        lower_message = message.lower()
        urgency = self.tables["urgency"]

        if any(word in lower_message for word in urgency["high"]):
            return "high"
        if any(word in lower_message for word in urgency["medium"]):
            return "medium"
        return "low"

    def detect_experience_level(
        self,
        message: str,
        user_profile: Optional[UserProfile] = None
    ) -> str:
        if user_profile is not None and user_profile.profile.experience:
            return user_profile.profile.experience

        lower_message = message.lower()
        levels = self.tables["experience_level"]

        if any(phrase in lower_message for phrase in levels["beginner"]):
            return "beginner"
        if any(phrase in lower_message for phrase in levels["advanced"]):
            return "advanced"

        return levels["default"]
