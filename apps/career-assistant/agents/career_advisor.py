from typing import Callable, List, Optional
from config import Settings, settings as default_settings
from models.ai_response import AIResponse, AdvisorState, SOURCE_GEMINI, SOURCE_MOCK
from models.chat import ChatContext
from models.metadata import TokenUsage
from agents.mock_responder import MockResponder
from processors.metadata_extractor import MetadataExtractor
from prompts.prompt_manager import PromptManager
from services.gemini_client import GeminiAPIError, GeminiClient
from utils.token_estimator import estimate_tokens
import logging
import re
import time

logger = logging.getLogger(__name__)

MOCK_CONFIDENCE = 0.85


class CareerAdvisor:
    """
    The CareerAdvisor agent turns a chat message into an AIResponse.

    Per call it moves through a small state machine:
    - NO_KEY: no Gemini credential, answer from the mock responder
    - ATTEMPTING(n): POST to Gemini, n = 1..max_retries, sleeping
      retry_delay * n between failed attempts
    - SUCCESS: format and annotate the Gemini text
    - FALLBACK: every attempt failed, answer from the mock responder

    generate_response() always returns an AIResponse; upstream failures
    are logged and downgraded, never raised.
    The states a call passed through come back on AIResponse.transitions;
    the advisor keeps no per-call state, so one instance serves concurrent
    requests.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        extractor: Optional[MetadataExtractor] = None,
        prompt_manager: Optional[PromptManager] = None,
        mock_responder: Optional[MockResponder] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.extractor = extractor or MetadataExtractor()
        self.prompt_manager = prompt_manager or PromptManager()
        self.mock_responder = mock_responder or MockResponder(self.prompt_manager)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.sleep = sleep

    def generate_response(
        self,
        message: str,
        context: Optional[ChatContext] = None
    ) -> AIResponse:
        """
        Generate a reply for a user message

        Args:
            message: User's message
            context: Chat history, profile and session context (optional)

        Returns:
            AIResponse with source 'gemini-api' or 'enhanced-mock'
        """
        context = context or ChatContext()
        transitions: List[AdvisorState] = []

        if self.client is None or not self.client.has_api_key:
            self._transition(transitions, AdvisorState.NO_KEY)
            logger.warning("No Gemini API key found, using enhanced mock response")
            return self._generate_mock_response(message, context, transitions)

        prompt = self.prompt_manager.build_career_chat_prompt(message, context)

        for attempt in range(1, self.max_retries + 1):
            self._transition(transitions, AdvisorState.ATTEMPTING)
            try:
                candidate = self.client.generate_content(prompt)
                response = self._build_api_response(message, prompt, candidate, context)
                self._transition(transitions, AdvisorState.SUCCESS)
                response.transitions = transitions
                return response

            except GeminiAPIError as e:
                logger.warning(f"Gemini API attempt {attempt}/{self.max_retries} failed: {e}")
            except Exception as e:
                logger.error(
                    f"Unexpected error on Gemini attempt {attempt}/{self.max_retries}: {e}",
                    exc_info=True
                )

            if attempt < self.max_retries:
                delay = self.retry_delay * attempt
                logger.info(f"Retrying Gemini in {delay}s...")
                self.sleep(delay)

        self._transition(transitions, AdvisorState.FALLBACK)
        logger.warning("All Gemini API attempts failed, falling back to enhanced mock response")
        return self._generate_mock_response(message, context, transitions)

    @staticmethod
    def _transition(transitions: List[AdvisorState], state: AdvisorState):
        transitions.append(state)
        logger.debug(f"CareerAdvisor state -> {state.value}")

    def _build_api_response(
        self,
        message: str,
        prompt: str,
        candidate: dict,
        context: ChatContext
    ) -> AIResponse:
        ai_text = GeminiClient.candidate_text(candidate)
        metadata = self.extractor.extract(message, ai_text, context.user_profile)

        return AIResponse(
            content=self.format_response(ai_text),
            metadata=metadata,
            tokens=TokenUsage(
                input=estimate_tokens(prompt),
                output=estimate_tokens(ai_text)
            ),
            confidence=self.calculate_confidence(candidate),
            source=SOURCE_GEMINI
        )

    def _generate_mock_response(
        self,
        message: str,
        context: ChatContext,
        transitions: List[AdvisorState]
    ) -> AIResponse:
        profile = context.user_profile
        intent = self.extractor.detect_intent(message)
        content = self.mock_responder.generate(intent, profile)
        metadata = self.extractor.extract(message, content, profile)

        return AIResponse(
            content=content,
            metadata=metadata,
            tokens=TokenUsage(
                input=estimate_tokens(message),
                output=estimate_tokens(content)
            ),
            confidence=MOCK_CONFIDENCE,
            source=SOURCE_MOCK,
            transitions=transitions
        )

    @staticmethod
    def format_response(text: str) -> str:
        """Collapse runs of 3+ newlines and trim"""
        return re.sub(r"\n{3,}", "\n\n", text).strip()

    @staticmethod
    def calculate_confidence(candidate: dict) -> float:
        """Heuristic quality score for a Gemini candidate

        Base 0.8; +0.1 clean STOP finish; +0.05 text over 100 chars;
        +0.05 every safety rating NEGLIGIBLE. Capped at 1.0.
        """
        confidence = 0.8

        if candidate.get("finishReason") == "STOP":
            confidence += 0.1

        parts = (candidate.get("content") or {}).get("parts") or [{}]
        if len(parts[0].get("text") or "") > 100:
            confidence += 0.05

        ratings = candidate.get("safetyRatings")
        if ratings is not None and all(rating.get("probability") == "NEGLIGIBLE" for rating in ratings):
            confidence += 0.05

        return min(round(confidence, 4), 1.0)


def build_career_advisor(config: Optional[Settings] = None) -> CareerAdvisor:
    """Wire a CareerAdvisor from settings"""
    config = config or default_settings

    client = None
    if config.GEMINI_API_KEY:
        client = GeminiClient(
            api_key=config.GEMINI_API_KEY,
            api_url=config.GEMINI_API_URL,
            timeout=config.GEMINI_TIMEOUT_SECONDS,
        )

    return CareerAdvisor(
        client=client,
        max_retries=config.GEMINI_MAX_RETRIES,
        retry_delay=config.GEMINI_RETRY_DELAY_SECONDS,
    )
