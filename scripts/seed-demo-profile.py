#!/usr/bin/env python3
"""
Seed the database with a demo user profile for trying the career assistant.

This creates (or overwrites) one user_profile row with:
- Background and experience
- Skills with levels and categories
- Career goals
- A short learning streak

Usage:
    python scripts/seed-demo-profile.py [user_id]
"""

import sys
import os
from datetime import datetime, timedelta, timezone

# Add career-assistant to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "apps", "career-assistant"))

from services.database import DatabaseService
from models.profile import (
    CareerGoal,
    Preferences,
    ProfileDetails,
    Streak,
    UserProfile,
    UserSkill,
)

DEFAULT_USER_ID = "demo_user"


def build_demo_profile(user_id: str) -> UserProfile:
    """Profile of a professional moving into data science"""
    now = datetime.now(timezone.utc)

    return UserProfile(
        user_id=user_id,
        name="Alex",
        background="professional",
        skills=[
            UserSkill(name="Python", level="intermediate", category="programming", added_at=now),
            UserSkill(name="Machine Learning", level="beginner", category="datascience", added_at=now),
            UserSkill(name="SQL", level="intermediate", category="databases", added_at=now),
            UserSkill(name="Data Visualization", level="beginner", category="datascience", added_at=now),
            UserSkill(name="Statistics", level="intermediate", category="datascience", added_at=now),
        ],
        career_goals=[
            CareerGoal(title="Become a Senior Data Scientist", priority="high"),
            CareerGoal(title="Get AWS ML Certification"),
            CareerGoal(title="Build 5 Portfolio Projects", priority="low"),
        ],
        preferences=Preferences(job_location="San Francisco, CA", job_type="full-time"),
        streak=Streak(current=3, longest=7, last_activity_date=(now - timedelta(days=1)).date()),
        profile=ProfileDetails(experience="2 years"),
    )


def main():
    """Write the demo profile"""
    user_id = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_USER_ID
    print(f"🌱 Seeding demo profile for user '{user_id}'...\n")

    try:
        db = DatabaseService()
        profile = build_demo_profile(user_id)
        db.client.table("user_profile").upsert(
            profile.model_dump(mode="json"), on_conflict="user_id"
        ).execute()

        print(f"✓ Created profile with {len(profile.skills)} skills and {len(profile.career_goals)} goals")
        print("\n✅ Database seeding complete!")
        print(
            "\nYou can now chat with: curl -X POST http://localhost:8000/chat/message "
            f"-H 'X-User-Id: {user_id}' -H 'Content-Type: application/json' "
            "-d '{\"content\": \"What are my goals for today?\"}'"
        )

    except Exception as e:
        print(f"\n❌ Error seeding database: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
