# storefront/repos/feedback_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.feedback import FeedbackModel

FILTERABLE = ("status", "type", "user_id")


class FeedbackRepo:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, stmt, filters: dict):
        for key in FILTERABLE:
            if filters.get(key) is not None:
                stmt = stmt.where(getattr(FeedbackModel, key) == filters[key])
        return stmt

    def get_feedback(self, feedback_id: int) -> FeedbackModel | None:
        return self.db.get(FeedbackModel, feedback_id)

    def create_feedback(self, feedback: FeedbackModel) -> FeedbackModel:
        self.db.add(feedback)
        self.db.commit()
        self.db.refresh(feedback)
        return feedback

    def update_feedback(self, feedback: FeedbackModel, fields: dict) -> FeedbackModel:
        for key, value in fields.items():
            setattr(feedback, key, value)
        self.db.commit()
        self.db.refresh(feedback)
        return feedback

    def delete_feedback(self, feedback: FeedbackModel) -> None:
        self.db.delete(feedback)
        self.db.commit()

    def list_feedback(self, filters: dict, offset: int, limit: int) -> list[FeedbackModel]:
        stmt = self._filtered(select(FeedbackModel), filters)
        stmt = stmt.order_by(FeedbackModel.created_at.desc(), FeedbackModel.id.desc())
        return self.db.execute(stmt.offset(offset).limit(limit)).scalars().all()

    def count_feedback(self, filters: dict) -> int:
        stmt = self._filtered(select(func.count(FeedbackModel.id)), filters)
        return self.db.execute(stmt).scalar_one()

    def get_statistics(self) -> dict:
        total = self.db.execute(select(func.count(FeedbackModel.id))).scalar_one()

        by_status = dict(
            self.db.execute(
                select(FeedbackModel.status, func.count(FeedbackModel.id))
                .group_by(FeedbackModel.status)
            ).all()
        )
        by_type = dict(
            self.db.execute(
                select(FeedbackModel.type, func.count(FeedbackModel.id))
                .group_by(FeedbackModel.type)
            ).all()
        )
        #avg pomija NULL, wiec liczy tylko wpisy z ocena
        average = self.db.execute(select(func.avg(FeedbackModel.rating))).scalar_one()

        return {
            "total": total,
            "by_status": by_status,
            "by_type": by_type,
            "average_rating": float(average) if average is not None else 0.0,
        }
