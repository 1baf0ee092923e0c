# storefront/api/routers/feedback.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import (
    FeedbackIn,
    FeedbackUpdate,
    FeedbackOut,
    FeedbackPage,
    FeedbackStats,
    OneClickFeedbackIn,
    BugReportIn,
    ResolveIn,
)
from storefront.services.feedback_service import FeedbackService

router = APIRouter(prefix="/feedback", tags=["feedback"])


def get_service(db: Session):
    return FeedbackService(db)


def validation_error(e: ValidationError):
    return HTTPException(status_code=400, detail={"message": "Validation failed", "errors": e.errors})


@router.post("/one-click", status_code=201)
def submit_one_click(payload: OneClickFeedbackIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        feedback = svc.create_one_click(payload.rating, payload.page_url, payload.type)
    except ValidationError as e:
        raise validation_error(e)
    return {
        "success": True,
        "message": "Feedback submitted successfully",
        "feedback": FeedbackOut(**feedback),
    }


@router.post("/bug-report", status_code=201)
def submit_bug_report(
    payload: BugReportIn,
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        feedback = svc.create_bug_report(payload.model_dump(), user_id=user_id)
    except ValidationError as e:
        raise validation_error(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "success": True,
        "message": "Bug report submitted successfully",
        "feedback": FeedbackOut(**feedback),
    }


@router.post("/", response_model=FeedbackOut, status_code=201)
def create_feedback(
    payload: FeedbackIn,
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create_feedback(payload.model_dump(), user_id=user_id)
    except ValidationError as e:
        raise validation_error(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/", response_model=FeedbackPage)
def list_feedback(
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None),
    page: int = Query(1),
    limit: int = Query(10),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_feedback(
            {"status": status, "type": type, "user_id": user_id},
            page=page,
            limit=limit,
        )
    except ValidationError as e:
        raise validation_error(e)


@router.get("/stats/overview", response_model=FeedbackStats)
def feedback_statistics(db: Session = Depends(get_db)):
    return get_service(db).statistics()


@router.get("/{feedback_id}", response_model=FeedbackOut)
def get_feedback(feedback_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_feedback(feedback_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{feedback_id}", response_model=FeedbackOut)
def update_feedback(feedback_id: int, payload: FeedbackUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_feedback(feedback_id, payload.model_dump(exclude_unset=True))
    except ValidationError as e:
        raise validation_error(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{feedback_id}")
def delete_feedback(feedback_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_feedback(feedback_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Feedback deleted successfully"}


@router.post("/{feedback_id}/resolve", response_model=FeedbackOut)
def resolve_feedback(feedback_id: int, payload: ResolveIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.resolve_feedback(feedback_id, payload.admin_response)
    except ValidationError as e:
        raise validation_error(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
