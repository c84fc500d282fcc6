# skillsync/core/matching.py

from sqlalchemy.orm import Session

from skillsync.models.profile import Profile


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def filter_profiles(
    profiles: list[Profile],
    search: str | None = None,
    skill: str | None = None,
) -> list[Profile]:
    """
    Case-insensitive substring filtering.

    search: matched against full_name or bio
    skill: matched against any skill to teach or to learn
    """
    filtered = list(profiles)

    if search:
        needle = search.lower()
        filtered = [
            p for p in filtered
            if _contains(p.full_name, needle) or _contains(p.bio, needle)
        ]

    if skill:
        needle = skill.lower()
        filtered = [
            p for p in filtered
            if any(
                needle in s.lower()
                for s in (p.skills_to_teach or []) + (p.skills_to_learn or [])
            )
        ]

    return filtered


def completed_profiles(db: Session, exclude_id: str | None = None) -> list[Profile]:
    query = db.query(Profile).filter(Profile.profile_completed.is_(True))
    if exclude_id:
        query = query.filter(Profile.id != exclude_id)
    return query.order_by(Profile.created_at, Profile.id).all()


def find_matches(
    db: Session,
    user_id: str,
    search: str | None = None,
    skill: str | None = None,
) -> list[Profile]:
    return filter_profiles(completed_profiles(db, exclude_id=user_id), search, skill)


def _aggregate(profiles: list[Profile], attr: str) -> list[dict]:
    by_skill: dict[str, dict] = {}
    for profile in profiles:
        for skill in getattr(profile, attr) or []:
            entry = by_skill.setdefault(skill, {"skill": skill, "users": []})
            entry["users"].append({
                "id": profile.id,
                "full_name": profile.full_name or "Unknown",
                "bio": profile.bio or "",
            })
    # Stable sort keeps first-seen order among equally popular skills
    return sorted(by_skill.values(), key=lambda e: len(e["users"]), reverse=True)


def skills_directory(db: Session) -> dict:
    profiles = completed_profiles(db)
    return {
        "teach": _aggregate(profiles, "skills_to_teach"),
        "learn": _aggregate(profiles, "skills_to_learn"),
    }
