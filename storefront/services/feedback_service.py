# storefront/services/feedback_service.py
import math
from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.feedback import FeedbackModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.validation import validate_feedback, ensure_valid
from storefront.repos.feedback_repo import FeedbackRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.product_service import page_bounds
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("title", "description", "type", "rating", "status")


def feedback_to_dict(f: FeedbackModel) -> Dict[str, Any]:
    return {
        "id": f.id,
        "title": f.title,
        "description": f.description,
        "type": f.type,
        "status": f.status,
        "rating": f.rating,
        "user_id": f.user_id,
        "user_email": f.user_email,
        "page_url": f.page_url,
        "browser_info": f.browser_info,
        "screenshot": f.screenshot,
        "admin_response": f.admin_response,
        "created_at": f.created_at,
        "updated_at": f.updated_at,
        "resolved_at": f.resolved_at,
    }


class FeedbackService:
    """
    Feedback, szybkie oceny (one-click) i zgloszenia bledow.
    Wszystko laduje w jednej tabeli, rozroznia je pole type.
    """

    def __init__(self, db: Session):
        self.repo = FeedbackRepo(db)
        self.users = UserRepo(db)

    def _get(self, feedback_id: int) -> FeedbackModel:
        feedback = self.repo.get_feedback(feedback_id)
        if not feedback:
            raise NotFoundError("Feedback not found")
        return feedback

    def _create(self, data: dict) -> Dict[str, Any]:
        ensure_valid(validate_feedback(data))
        if data.get("user_id") is not None:
            self.users.get_user_or_raise(data["user_id"])

        fields = {k: v for k, v in data.items() if v is not None}
        for key in ("title", "description"):
            fields[key] = fields[key].strip()

        feedback = self.repo.create_feedback(FeedbackModel(**fields, status="open"))
        logger.info(f"Nowy feedback {feedback.id} typu {feedback.type}")
        return feedback_to_dict(feedback)

    #query
    def get_feedback(self, feedback_id: int) -> Dict[str, Any]:
        return feedback_to_dict(self._get(feedback_id))

    def list_feedback(self, filters: dict, page: int = 1, limit: int | None = 10) -> Dict[str, Any]:
        offset, limit = page_bounds(page, limit)

        items = self.repo.list_feedback(filters, offset=offset, limit=limit)
        total = self.repo.count_feedback(filters)

        return {
            "items": [feedback_to_dict(f) for f in items],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        }

    def statistics(self) -> Dict[str, Any]:
        stats = self.repo.get_statistics()
        stats["timestamp"] = datetime.now(timezone.utc)
        return stats

    #commands
    def create_feedback(self, data: dict, user_id: int | None = None) -> Dict[str, Any]:
        return self._create({**data, "user_id": user_id})

    def create_one_click(self, rating: int, page_url: str | None = None, type: str = "feedback") -> Dict[str, Any]:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError([{"field": "rating", "message": "Rating must be between 1 and 5"}])

        prefix = "Rating" if type == "feedback" else "Quick"
        return self._create({
            "title": f"{prefix} Feedback: {rating}/5",
            "description": f"User submitted a {rating}-star rating for {page_url or 'the application'}",
            "type": type,
            "rating": rating,
            "page_url": page_url,
        })

    def create_bug_report(self, data: dict, user_id: int | None = None) -> Dict[str, Any]:
        fields = {
            key: data.get(key)
            for key in ("title", "description", "page_url", "user_email", "browser_info", "screenshot")
        }
        return self._create({**fields, "type": "bug", "user_id": user_id})

    def update_feedback(self, feedback_id: int, data: dict) -> Dict[str, Any]:
        fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS and v is not None}
        ensure_valid(validate_feedback(fields, partial=True))

        feedback = self._get(feedback_id)

        for key in ("title", "description"):
            if key in fields:
                fields[key] = fields[key].strip()

        # resolved_at ustawiany tylko przy pierwszym przejsciu na resolved
        if fields.get("status") == "resolved" and feedback.resolved_at is None:
            fields["resolved_at"] = datetime.now(timezone.utc)

        updated = self.repo.update_feedback(feedback, fields)
        logger.info(f"Zaktualizowano feedback {feedback_id}: {sorted(fields)}")
        return feedback_to_dict(updated)

    def resolve_feedback(self, feedback_id: int, admin_response: str) -> Dict[str, Any]:
        admin_response = (admin_response or "").strip()
        if not admin_response:
            raise ValidationError([{"field": "admin_response", "message": "Admin response is required"}])

        feedback = self._get(feedback_id)
        updated = self.repo.update_feedback(feedback, {
            "status": "resolved",
            "admin_response": admin_response,
            "resolved_at": datetime.now(timezone.utc),
        })
        logger.info(f"Feedback {feedback_id} rozwiazany")
        return feedback_to_dict(updated)

    def delete_feedback(self, feedback_id: int) -> None:
        self.repo.delete_feedback(self._get(feedback_id))
        logger.info(f"Usunieto feedback {feedback_id}")
