# backend/fitkeeper/models/user.py
from datetime import datetime
from .. import db

PROVIDERS = ("kakao", "google", "naver")


class User(db.Model):
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("provider", "provider_id", name="uq_users_provider_identity"),
    )

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    provider = db.Column(db.String(20), nullable=False)
    provider_id = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255))
    name = db.Column(db.String(100))

    # derived fitness summary (latest recipe)
    fitness_grade = db.Column(db.String(20))
    fitness_score = db.Column(db.Float)
    is_premium = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "provider": self.provider,
            "email": self.email,
            "name": self.name,
            "fitness_grade": self.fitness_grade,
            "fitness_score": self.fitness_score,
            "is_premium": bool(self.is_premium),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
