#!/usr/bin/env python3
"""Run the career advisor directly to see what it returns (no database needed)"""

from agents.career_advisor import build_career_advisor
from models.chat import ChatContext, ChatMessage
from models.profile import CareerGoal, UserProfile, UserSkill
import json
import sys

message = " ".join(sys.argv[1:]) or "I want to become a data scientist. Help me build a learning roadmap!"

context = ChatContext(
    chat_history=[
        ChatMessage(role="user", content="Hi, I'm new to tech and just started learning Python."),
        ChatMessage(role="assistant", content="Welcome! Python is a great first language."),
    ],
    user_profile=UserProfile(
        name="Alex",
        background="professional",
        skills=[UserSkill(name="Python", level="beginner")],
        career_goals=[CareerGoal(title="Become a Data Scientist")],
    ),
)

print(f"Asking the career advisor: {message}")
print("=" * 80)
print()

advisor = build_career_advisor()
response = advisor.generate_response(message, context)

print(response.content)
print()
print("=" * 80)
print(f"Source: {response.source}  Confidence: {response.confidence:.2f}")
print(f"States: {[state.value for state in response.transitions]}")
print()
print("Metadata:")
print(json.dumps(response.metadata.model_dump(mode="json"), indent=2))
