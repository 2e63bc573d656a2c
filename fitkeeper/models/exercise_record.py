# backend/fitkeeper/models/exercise_record.py
from datetime import datetime
from .. import db


class ExerciseRecord(db.Model):
    """A user's latest attempt at one exercise title (one row per user/title)."""

    __tablename__ = "exercise_records"
    __table_args__ = (
        db.UniqueConstraint("user_id", "title", name="uq_exercise_records_user_title"),
    )

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(200), nullable=False, index=True)
    average_accuracy = db.Column(db.Float, nullable=False)
    exercise_duration = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", backref="exercise_records")

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "average_accuracy": self.average_accuracy,
            "exercise_duration": self.exercise_duration,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
