import yaml
import os
from pathlib import Path
from typing import Dict, Any, List, Optional
from models.chat import ChatContext, ChatMessage, SessionContext
from models.profile import UserProfile
import logging

logger = logging.getLogger(__name__)


class PromptManager:
    """
    Manages prompt templates with hot-reload support

    Loads prompts from YAML files and provides methods to build
    prompts with dynamic context injection.
    """

    def __init__(self, prompts_dir: Optional[str] = None):
        if prompts_dir is None:
            # Default to prompts/ directory in the same location as this file
            prompts_dir = Path(__file__).parent

        self.prompts_dir = Path(prompts_dir)
        self.cache: Dict[str, Dict[str, Any]] = {}
        logger.info(f"PromptManager initialized with directory: {self.prompts_dir}")

    def get_prompt_config(self, prompt_name: str) -> Dict[str, Any]:
        """
        Load prompt configuration from YAML file with hot-reload support

        Args:
            prompt_name: Name of the prompt file (without .yaml extension)

        Returns:
            Dictionary containing the prompt configuration
        """
        filepath = self.prompts_dir / f"{prompt_name}.yaml"

        if not filepath.exists():
            raise FileNotFoundError(f"Prompt file not found: {filepath}")

        # Get file modification time for hot-reload
        mtime = os.path.getmtime(filepath)

        cache_key = prompt_name

        # Check if we need to reload (file changed or not in cache)
        if cache_key not in self.cache or self.cache[cache_key].get('mtime') != mtime:
            logger.info(f"Loading/reloading prompt: {prompt_name}")
            with open(filepath, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)

            self.cache[cache_key] = {
                'data': config,
                'mtime': mtime
            }

        return self.cache[cache_key]['data']

    def build_career_chat_prompt(
        self,
        message: str,
        context: Optional[ChatContext] = None
    ) -> str:
        """
        Build the career advisor chat prompt using the YAML configuration

        Output is deterministic for identical inputs. No length cap is
        applied; the caller owns the upstream input limit.

        Args:
            message: User's current message
            context: Chat history, user profile and session context

        Returns:
            Complete prompt string ready for Gemini
        """
        config = self.get_prompt_config("career_chat")
        context = context or ChatContext()

        sections = []

        sections.append(config['system_role'])
        sections.append(f"\n{config['context_header']}")
        sections.append(self._build_profile(context.user_profile, config['profile']))
        sections.append(f"\n{self._build_session(context.session_context, config['session'])}\n")

        history_config = config.get('conversation_history', {})
        if history_config.get('enabled', True) and context.chat_history:
            sections.append(self._build_conversation_history(context.chat_history, history_config))

        sections.append(f"{config['message_header']} \"{message}\"")

        for section in config.get('guideline_sections', []):
            sections.append(f"\n{section['header']}")
            for i, item in enumerate(section['items'], 1):
                prefix = f"{i}." if section.get('numbered') else "-"
                sections.append(f"{prefix} {item}")

        sections.append(f"\n{config['final_instruction']}")

        return "\n".join(sections)

    def _build_profile(self, profile: UserProfile, config: Dict) -> str:
        """Build user profile section, with literal fallbacks for missing fields"""
        missing = config.get('missing_value', 'Not specified')

        lines = [config.get('header', 'User Profile:')]
        lines.append(f"- Background: {profile.background or missing}")
        lines.append(f"- Experience Level: {profile.profile.experience or missing}")
        lines.append(f"- Current Skills: {self.format_skills(profile, config)}")
        lines.append(f"- Career Goals: {self.format_goals(profile, config)}")
        lines.append(f"- Location Preference: {profile.preferences.job_location or missing}")
        lines.append(f"- Current Streak: {profile.streak.current or 0} days")
        lines.append(f"- Total Skills: {len(profile.skills)}")
        lines.append(f"- Job Type Preference: {profile.preferences.job_type or missing}")

        return "\n".join(lines)

    def _build_session(self, session: SessionContext, config: Dict) -> str:
        """Build session context section"""
        topics = ", ".join(session.topics) if session.topics else config.get('missing_topics', 'None')

        lines = [config.get('header', 'Session Context:')]
        lines.append(f"- Previous Topics: {topics}")
        lines.append(f"- User Intent: {session.intent or config.get('missing_intent', 'General inquiry')}")
        lines.append(f"- Conversation Stage: {session.stage or config.get('missing_stage', 'Initial')}")

        return "\n".join(lines)

    def _build_conversation_history(self, history: List[ChatMessage], config: Dict) -> str:
        """Build conversation history section from the most recent messages"""
        max_items = config.get('max_items', 5)
        max_chars = config.get('max_chars', 200)
        ellipsis = config.get('ellipsis', '...')
        header = config.get('header', 'Recent Conversation History:')
        format_str = config.get('format', '{role_label}: {content}')

        lines = [header]
        for msg in history[-max_items:]:
            role_label = "User" if msg.role == "user" else "Assistant"
            content = msg.content[:max_chars]
            if len(msg.content) > max_chars:
                content += ellipsis
            lines.append(format_str.format(
                role_label=role_label,
                content=content,
                role=msg.role
            ))

        return "\n".join(lines) + "\n"

    @staticmethod
    def format_skills(profile: UserProfile, config: Optional[Dict] = None) -> str:
        if not profile.skills:
            return (config or {}).get('missing_list', 'None specified')
        return ", ".join(f"{skill.name} ({skill.level})" for skill in profile.skills)

    @staticmethod
    def format_goals(profile: UserProfile, config: Optional[Dict] = None) -> str:
        if not profile.career_goals:
            return (config or {}).get('missing_list', 'None specified')
        return ", ".join(goal.title for goal in profile.career_goals)
