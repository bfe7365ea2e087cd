"""Tests for the CareerAdvisor retry/fallback orchestration"""
import math
import pytest
import threading
from unittest.mock import Mock, call
from agents.career_advisor import AdvisorState, CareerAdvisor, MOCK_CONFIDENCE, build_career_advisor
from config import Settings
from models.ai_response import SOURCE_GEMINI, SOURCE_MOCK
from models.chat import ChatContext
from prompts.prompt_manager import PromptManager
from services.gemini_client import GeminiAPIError, GeminiClient
from tests.fixtures.career_fixtures import gemini_candidate, sample_history, sample_profile

LONG_TEXT = "Start by mapping your marketing analytics work to data analyst skills. " * 3


def make_client(side_effect=None, return_value=None):
    client = Mock(spec=GeminiClient)
    client.has_api_key = True
    if side_effect is not None:
        client.generate_content.side_effect = side_effect
    else:
        client.generate_content.return_value = return_value
    return client


@pytest.fixture
def sleep():
    return Mock()


@pytest.fixture
def context():
    return ChatContext(chat_history=sample_history(3), user_profile=sample_profile())


# ============================================================================
# No key
# ============================================================================


def test_no_client_uses_mock(sleep):
    advisor = CareerAdvisor(client=None, sleep=sleep)

    response = advisor.generate_response("Help me build a learning roadmap")

    assert response.source == SOURCE_MOCK
    assert response.confidence == MOCK_CONFIDENCE
    assert response.content.startswith("# 🗺️ Personalized Career Roadmap for there")
    assert response.metadata.intent == "roadmap_request"
    assert response.transitions == [AdvisorState.NO_KEY]
    sleep.assert_not_called()


def test_client_without_key_makes_no_call(sleep):
    """Test an unconfigured key never reaches the network"""
    client = Mock(spec=GeminiClient)
    client.has_api_key = False
    advisor = CareerAdvisor(client=client, sleep=sleep)

    response = advisor.generate_response("Hello")

    client.generate_content.assert_not_called()
    assert response.source == SOURCE_MOCK
    assert response.transitions == [AdvisorState.NO_KEY]


def test_mock_response_uses_profile(context):
    advisor = CareerAdvisor(client=None)

    response = advisor.generate_response("What are my goals for today?", context)

    assert "# 🎯 Your Daily Goals, Priya!" in response.content
    assert response.metadata.intent == "daily_goals"
    assert response.metadata.experience_level == "3 years"


def test_mock_response_token_estimates():
    advisor = CareerAdvisor(client=None)
    message = "How do I prepare for an interview?"

    response = advisor.generate_response(message)

    assert response.tokens.input == math.ceil(len(message) / 4)
    assert response.tokens.output == math.ceil(len(response.content) / 4)


# ============================================================================
# Gemini success
# ============================================================================


def test_success_first_attempt(context, sleep):
    client = make_client(return_value=gemini_candidate(text=LONG_TEXT))
    advisor = CareerAdvisor(client=client, sleep=sleep)

    response = advisor.generate_response("I want to switch careers into data", context)

    assert response.source == SOURCE_GEMINI
    assert response.content == LONG_TEXT.strip()
    assert response.confidence == 1.0
    assert response.metadata.intent == "career_transition"
    assert response.transitions == [AdvisorState.ATTEMPTING, AdvisorState.SUCCESS]
    client.generate_content.assert_called_once()
    sleep.assert_not_called()


def test_success_sends_built_prompt(context):
    client = make_client(return_value=gemini_candidate())
    advisor = CareerAdvisor(client=client)
    message = "How do I learn SQL?"

    response = advisor.generate_response(message, context)

    expected_prompt = PromptManager().build_career_chat_prompt(message, context)
    client.generate_content.assert_called_once_with(expected_prompt)
    assert response.tokens.input == math.ceil(len(expected_prompt) / 4)
    assert response.tokens.output == math.ceil(len("Here is a thorough plan for you.") / 4)


def test_success_formats_text():
    """Test blank-line runs collapse and outer whitespace is trimmed"""
    raw = "\n  # Plan\n\n\n\n- Learn SQL\n\n\n- Build a dashboard  \n\n"
    client = make_client(return_value=gemini_candidate(text=raw))
    advisor = CareerAdvisor(client=client)

    response = advisor.generate_response("Hi")

    assert response.content == "# Plan\n\n- Learn SQL\n\n- Build a dashboard"


# ============================================================================
# Retry and fallback
# ============================================================================


def test_all_attempts_fail_falls_back(sleep):
    """Test 3 failures sleep 1s then 2s and end in the mock reply"""
    client = make_client(side_effect=GeminiAPIError("503"))
    advisor = CareerAdvisor(client=client, max_retries=3, retry_delay=1.0, sleep=sleep)

    response = advisor.generate_response("Any job openings?")

    assert client.generate_content.call_count == 3
    assert sleep.call_args_list == [call(1.0), call(2.0)]
    assert response.source == SOURCE_MOCK
    assert response.confidence == MOCK_CONFIDENCE
    assert response.content.startswith("# 💼 Job Search Strategy")
    assert response.transitions == [
        AdvisorState.ATTEMPTING,
        AdvisorState.ATTEMPTING,
        AdvisorState.ATTEMPTING,
        AdvisorState.FALLBACK,
    ]


def test_recovers_on_second_attempt(sleep):
    client = make_client(side_effect=[GeminiAPIError("timeout"), gemini_candidate(text=LONG_TEXT)])
    advisor = CareerAdvisor(client=client, sleep=sleep)

    response = advisor.generate_response("Hello")

    assert response.source == SOURCE_GEMINI
    assert client.generate_content.call_count == 2
    assert sleep.call_args_list == [call(1.0)]
    assert response.transitions == [
        AdvisorState.ATTEMPTING,
        AdvisorState.ATTEMPTING,
        AdvisorState.SUCCESS,
    ]


def test_unexpected_error_is_retried(sleep):
    """Test non-API exceptions are treated as a failed attempt"""
    client = make_client(side_effect=[RuntimeError("boom"), gemini_candidate()])
    advisor = CareerAdvisor(client=client, sleep=sleep)

    response = advisor.generate_response("Hello")

    assert response.source == SOURCE_GEMINI


def test_unexpected_errors_still_resolve(sleep):
    client = make_client(side_effect=KeyError("candidates"))
    advisor = CareerAdvisor(client=client, max_retries=2, retry_delay=0.5, sleep=sleep)

    response = advisor.generate_response("Hello")

    assert response.source == SOURCE_MOCK
    assert sleep.call_args_list == [call(0.5)]


def test_single_attempt_never_sleeps(sleep):
    client = make_client(side_effect=GeminiAPIError("down"))
    advisor = CareerAdvisor(client=client, max_retries=1, sleep=sleep)

    advisor.generate_response("Hello")

    assert client.generate_content.call_count == 1
    sleep.assert_not_called()


def test_transitions_are_kept_per_call(sleep):
    """Test overlapping calls on one advisor each report only their own states"""
    entered = threading.Event()
    release = threading.Event()

    def generate_content(prompt):
        if '"first"' in prompt:
            entered.set()
            release.wait(timeout=5)
            return gemini_candidate()
        raise GeminiAPIError("down")

    client = make_client(side_effect=generate_content)
    advisor = CareerAdvisor(client=client, max_retries=1, sleep=sleep)
    results = {}

    worker = threading.Thread(target=lambda: results.update(first=advisor.generate_response("first")))
    worker.start()
    assert entered.wait(timeout=5)

    second = advisor.generate_response("second")
    release.set()
    worker.join(timeout=5)

    assert results["first"].transitions == [AdvisorState.ATTEMPTING, AdvisorState.SUCCESS]
    assert second.transitions == [AdvisorState.ATTEMPTING, AdvisorState.FALLBACK]


def test_transitions_are_not_serialized():
    response = CareerAdvisor(client=None).generate_response("Hello")

    assert response.transitions == [AdvisorState.NO_KEY]
    assert "transitions" not in response.model_dump()


# ============================================================================
# Confidence
# ============================================================================


def test_confidence_full_marks():
    candidate = gemini_candidate(text=LONG_TEXT)
    assert CareerAdvisor.calculate_confidence(candidate) == 1.0


def test_confidence_short_text():
    candidate = gemini_candidate(text="Short answer")
    assert CareerAdvisor.calculate_confidence(candidate) == 0.95


def test_confidence_non_negligible_rating():
    candidate = gemini_candidate(
        text="Short answer",
        finish_reason="MAX_TOKENS",
        ratings=[{"category": "HARM_CATEGORY_HARASSMENT", "probability": "LOW"}],
    )
    assert CareerAdvisor.calculate_confidence(candidate) == 0.8


def test_confidence_without_ratings():
    candidate = gemini_candidate(text="Short answer")
    del candidate["safetyRatings"]
    assert CareerAdvisor.calculate_confidence(candidate) == 0.9


def test_confidence_empty_ratings_list():
    candidate = gemini_candidate(text="Short answer", finish_reason="MAX_TOKENS", ratings=[])
    assert CareerAdvisor.calculate_confidence(candidate) == 0.85


# ============================================================================
# Factory
# ============================================================================


def test_build_career_advisor_without_key():
    advisor = build_career_advisor(Settings(GEMINI_API_KEY=None))
    assert advisor.client is None


def test_build_career_advisor_with_key():
    config = Settings(
        GEMINI_API_KEY="abc",
        GEMINI_MAX_RETRIES=5,
        GEMINI_RETRY_DELAY_SECONDS=0.25,
        GEMINI_TIMEOUT_SECONDS=10.0,
    )

    advisor = build_career_advisor(config)

    assert advisor.client.has_api_key
    assert advisor.client.timeout == 10.0
    assert advisor.max_retries == 5
    assert advisor.retry_delay == 0.25
