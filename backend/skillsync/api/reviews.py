# skillsync/api/reviews.py

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from skillsync.api.serializers import review_out
from skillsync.core import review as review_core
from skillsync.core.security import CurrentUser, get_current_user
from skillsync.infra.postgres import get_db

router = APIRouter(prefix="/reviews")


class CreateReviewSchema(BaseModel):
    session_id: str
    reviewee_id: str
    rating: int
    comment: str | None = None


class UpdateReviewSchema(BaseModel):
    rating: int
    comment: str | None = None


@router.post("", status_code=201)
def create_review(
    payload: CreateReviewSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = review_core.create_review(
        db,
        user,
        session_id=payload.session_id,
        reviewee_id=payload.reviewee_id,
        rating=payload.rating,
        comment=payload.comment,
    )
    return review_out(review)


@router.get("/users/{user_id}")
def reviews_received(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        review_out(item["review"], item["reviewer_name"])
        for item in review_core.list_reviews_for(db, user, user_id)
    ]


@router.put("/{review_id}")
def update_review(
    review_id: str,
    payload: UpdateReviewSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = review_core.update_review(db, user, review_id, payload.rating, payload.comment)
    return review_out(review)


@router.delete("/{review_id}", status_code=204)
def delete_review(
    review_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review_core.delete_review(db, user, review_id)
