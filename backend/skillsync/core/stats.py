# skillsync/core/stats.py

import math
from collections import defaultdict
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillsync.core.exceptions import ValidationError
from skillsync.models.profile import Profile
from skillsync.models.review import Review
from skillsync.models.session import LearningSession

RECENT_REVIEWS_LIMIT = 10
TOP_SKILLS_LIMIT = 5
MONTHS_SHOWN = 6

LEADERBOARD_SORTS = ("satisfaction", "sessions", "rating")


def round1(value: float) -> float:
    """One decimal, halves rounded up (4.25 -> 4.3)."""
    return math.floor(value * 10 + 0.5) / 10


def _months_back(now: datetime, count: int) -> list[tuple[int, int]]:
    """(year, month) for the last `count` calendar months, oldest first."""
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def _top_skills(hours_by_skill: dict[str, float]) -> list[dict]:
    ranked = sorted(hours_by_skill.items(), key=lambda kv: kv[1], reverse=True)
    return [{"name": name, "hours": round1(hours)} for name, hours in ranked[:TOP_SKILLS_LIMIT]]


def compute_dashboard_stats(
    user_id: str,
    sessions: list[LearningSession],
    reviews: list[Review],
    now: datetime,
) -> dict:
    completed = [s for s in sessions if s.status == "completed"]
    taught = [s for s in completed if s.teacher_id == user_id]
    learned = [s for s in completed if s.learner_id == user_id]

    hours_taught = sum(s.duration_minutes / 60 for s in taught)
    hours_learned = sum(s.duration_minutes / 60 for s in learned)

    taught_by_skill: dict[str, float] = defaultdict(float)
    for s in taught:
        taught_by_skill[s.skill] += s.duration_minutes / 60
    learned_by_skill: dict[str, float] = defaultdict(float)
    for s in learned:
        learned_by_skill[s.skill] += s.duration_minutes / 60

    buckets = {key: {"taught": 0, "learned": 0} for key in _months_back(now, MONTHS_SHOWN)}
    for s in completed:
        bucket = buckets.get((s.scheduled_at.year, s.scheduled_at.month))
        if bucket is None:
            continue
        if s.teacher_id == user_id:
            bucket["taught"] += 1
        else:
            bucket["learned"] += 1

    sessions_over_time = [
        {
            "month": datetime(year, month, 1).strftime("%b"),
            "year": year,
            **counts,
        }
        for (year, month), counts in buckets.items()
    ]

    average_rating = sum(r.rating for r in reviews) / len(reviews) if reviews else 0

    return {
        "hours_taught": round1(hours_taught),
        "hours_learned": round1(hours_learned),
        "total_sessions": len(completed),
        "average_rating": round1(average_rating),
        "skills_taught": _top_skills(taught_by_skill),
        "skills_learned": _top_skills(learned_by_skill),
        "sessions_over_time": sessions_over_time,
    }


def dashboard_stats(db: Session, user_id: str, now: datetime | None = None) -> dict:
    sessions = (
        db.query(LearningSession)
        .filter(
            or_(LearningSession.teacher_id == user_id, LearningSession.learner_id == user_id)
        )
        .all()
    )
    reviews = (
        db.query(Review)
        .filter(Review.reviewee_id == user_id)
        .order_by(Review.created_at.desc())
        .limit(RECENT_REVIEWS_LIMIT)
        .all()
    )
    return compute_dashboard_stats(user_id, sessions, reviews, now or datetime.utcnow())


# =========================
# LEADERBOARD
# =========================

def initials(full_name: str | None) -> str:
    parts = (full_name or "A").split()
    return "".join(p[0] for p in parts).upper()[:2] or "A"


def satisfaction_score(average_rating: float, sessions: int, reviews: int) -> float:
    return average_rating * 10 + min(sessions * 2, 30) + min(reviews * 5, 20)


def compute_leaderboard(
    profiles: list[Profile],
    taught_counts: dict[str, int],
    ratings: dict[str, list[int]],
    sort_by: str = "satisfaction",
) -> list[dict]:
    if sort_by not in LEADERBOARD_SORTS:
        raise ValidationError(f"Unknown sort: {sort_by}", field="sort_by")

    entries = []
    for profile in profiles:
        sessions = taught_counts.get(profile.id, 0)
        received = ratings.get(profile.id, [])
        if sessions == 0 and not received:
            continue

        average = sum(received) / len(received) if received else 0
        entries.append({
            "id": profile.id,
            "full_name": profile.full_name or "Anonymous",
            "avatar_initials": initials(profile.full_name),
            "total_sessions": sessions,
            "average_rating": average,
            "total_reviews": len(received),
            "skills_to_teach": profile.skills_to_teach or [],
            "satisfaction_score": satisfaction_score(average, sessions, len(received)),
        })

    key = {
        "satisfaction": lambda e: e["satisfaction_score"],
        "sessions": lambda e: e["total_sessions"],
        "rating": lambda e: e["average_rating"],
    }[sort_by]
    return sorted(entries, key=key, reverse=True)


def leaderboard(db: Session, sort_by: str = "satisfaction") -> list[dict]:
    taught_counts: dict[str, int] = defaultdict(int)
    for (teacher_id,) in (
        db.query(LearningSession.teacher_id).filter(LearningSession.status == "completed").all()
    ):
        taught_counts[teacher_id] += 1

    ratings: dict[str, list[int]] = defaultdict(list)
    for reviewee_id, rating in db.query(Review.reviewee_id, Review.rating).all():
        ratings[reviewee_id].append(rating)

    profiles = db.query(Profile).filter(Profile.profile_completed.is_(True)).all()
    return compute_leaderboard(profiles, taught_counts, ratings, sort_by)
