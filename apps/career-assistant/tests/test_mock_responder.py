"""Tests for MockResponder canned replies"""
import pytest
from agents.mock_responder import MockResponder
from models.profile import ProfileDetails, Streak, UserProfile, UserSkill
from tests.fixtures.career_fixtures import empty_profile, sample_profile

INTENTS = [
    "daily_goals",
    "roadmap_request",
    "job_search",
    "skill_development",
    "interview_prep",
    "salary_inquiry",
    "career_transition",
    "general_guidance",
]


@pytest.fixture
def responder():
    return MockResponder()


@pytest.mark.parametrize("intent", INTENTS)
def test_every_intent_renders_with_empty_profile(responder, intent):
    """Test no template fails or leaks placeholders when the profile is empty"""
    reply = responder.generate(intent, empty_profile())

    assert reply.startswith("# ")
    assert "there" in reply
    assert "{" not in reply
    assert "}" not in reply


@pytest.mark.parametrize("intent", INTENTS)
def test_every_intent_uses_profile_name(responder, intent):
    reply = responder.generate(intent, sample_profile())
    assert "Priya" in reply


def test_generate_without_profile(responder):
    reply = responder.generate("general_guidance")
    assert reply.startswith("# 🎯 Welcome back, there!")


def test_unknown_intent_falls_back_to_general_guidance(responder):
    """Test an unrecognized intent renders the general guidance reply"""
    assert responder.generate("made_up_intent", sample_profile()) == responder.generate(
        "general_guidance", sample_profile()
    )


def test_daily_goals_with_profile(responder):
    reply = responder.generate("daily_goals", sample_profile())

    assert "# 🎯 Your Daily Goals, Priya!" in reply
    assert "**4-day learning streak**" in reply
    # first three skills only
    assert "Based on your current skills (Python, SQL, Tableau), I suggest:" in reply
    # first two goals only
    assert "Your career goals: Become a Data Analyst, Get AWS Certification" in reply
    assert "Build a portfolio" not in reply


def test_daily_goals_without_profile_data(responder):
    reply = responder.generate("daily_goals", empty_profile())

    assert "Today is a perfect day to start a new learning streak!" in reply
    assert "Let's start building your skill foundation:" in reply
    assert "Consider setting a specific career goal today!" in reply


def test_job_search_skills_line(responder):
    with_skills = responder.generate("job_search", sample_profile())
    without_skills = responder.generate("job_search", empty_profile())

    assert "With your skills in Python, SQL, Tableau" in with_skills
    assert "well-positioned" not in without_skills


def test_skill_development_counts_skills(responder):
    assert "You already have 4 skills in your profile" in responder.generate("skill_development", sample_profile())
    assert "Let's start building your skill portfolio!" in responder.generate("skill_development", empty_profile())


def test_interview_prep_experience(responder):
    assert "With your **3 years** of experience" in responder.generate("interview_prep", sample_profile())
    assert "With your **0-1 years** of experience" in responder.generate("interview_prep", empty_profile())


def test_career_transition_background(responder):
    assert "As a **marketing manager**" in responder.generate("career_transition", sample_profile())
    assert "As a **professional**" in responder.generate("career_transition", empty_profile())


def test_general_guidance_streak_line(responder):
    profile = UserProfile(name="Sam", streak=Streak(current=12, longest=12))

    reply = responder.generate("general_guidance", profile)

    assert "# 🎯 Welcome back, Sam!" in reply
    assert "🔥 Fantastic! You're on a 12-day learning streak!" in reply


def test_general_guidance_without_streak(responder):
    reply = responder.generate("general_guidance", empty_profile())
    assert "Ready to start your career journey?" in reply


def test_single_skill_profile(responder):
    profile = UserProfile(skills=[UserSkill(name="Excel")], profile=ProfileDetails())

    reply = responder.generate("daily_goals", profile)

    assert "Based on your current skills (Excel), I suggest:" in reply
