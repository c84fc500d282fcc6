# skillsync/core/review.py

from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillsync.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from skillsync.core.profile import display_names, get_profile
from skillsync.core.security import CurrentUser
from skillsync.models.profile import Profile
from skillsync.models.review import Review
from skillsync.models.session import LearningSession

COMMENT_MAX = 1000


def _validate(rating: int, comment: str | None) -> str | None:
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5", field="rating")
    comment = (comment or "").strip() or None
    if comment and len(comment) > COMMENT_MAX:
        raise ValidationError(
            f"Comment must be less than {COMMENT_MAX} characters", field="comment"
        )
    return comment


def create_review(
    db: Session,
    user: CurrentUser,
    session_id: str,
    reviewee_id: str,
    rating: int,
    comment: str | None = None,
) -> Review:
    comment = _validate(rating, comment)

    session = db.query(LearningSession).filter(LearningSession.id == session_id).first()
    if session is None:
        raise NotFoundError("Session not found", {"session_id": session_id})

    participants = {session.teacher_id, session.learner_id}
    if user.id not in participants:
        raise PermissionDeniedError("Only participants can review a session")
    if reviewee_id not in participants or reviewee_id == user.id:
        raise ValidationError("Reviewee must be the other participant", field="reviewee_id")
    if session.status != "completed":
        raise ValidationError("Only completed sessions can be reviewed", field="session_id")

    if get_profile(db, user.id) is None or get_profile(db, reviewee_id) is None:
        raise NotFoundError("Profile not found")

    existing = (
        db.query(Review)
        .filter(Review.session_id == session_id, Review.reviewer_id == user.id)
        .first()
    )
    if existing:
        raise ValidationError("You have already reviewed this session", field="session_id")

    review = Review(
        session_id=session_id,
        reviewer_id=user.id,
        reviewee_id=reviewee_id,
        rating=rating,
        comment=comment,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def list_reviews_for(db: Session, user: CurrentUser, user_id: str) -> list[dict]:
    """Reviews received by user_id that the caller may see."""
    reviewee_public = (
        db.query(Profile.id)
        .filter(Profile.id == user_id, Profile.profile_completed.is_(True))
        .first()
        is not None
    )

    query = db.query(Review).filter(Review.reviewee_id == user_id)
    if not reviewee_public:
        query = query.filter(or_(Review.reviewer_id == user.id, Review.reviewee_id == user.id))

    reviews = query.order_by(Review.created_at.desc()).all()
    names = display_names(db, (r.reviewer_id for r in reviews))
    return [
        {"review": r, "reviewer_name": names.get(r.reviewer_id, "Anonymous")}
        for r in reviews
    ]


def _own_review(db: Session, user: CurrentUser, review_id: str) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if review is None:
        raise NotFoundError("Review not found", {"review_id": review_id})
    if review.reviewer_id != user.id:
        raise PermissionDeniedError("Only the reviewer can change this review")
    return review


def update_review(
    db: Session, user: CurrentUser, review_id: str, rating: int, comment: str | None = None
) -> Review:
    comment = _validate(rating, comment)
    review = _own_review(db, user, review_id)
    review.rating = rating
    review.comment = comment
    review.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, user: CurrentUser, review_id: str) -> None:
    review = _own_review(db, user, review_id)
    db.delete(review)
    db.commit()
