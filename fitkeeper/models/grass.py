# backend/fitkeeper/models/grass.py
from .. import db


class GrassHistory(db.Model):
    """Per-day activity flags ("grass" calendar); at most one row per user and date."""

    __tablename__ = "grass_history"
    __table_args__ = (
        db.UniqueConstraint("user_id", "record_date", name="uq_grass_history_user_date"),
    )

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    record_date = db.Column(db.Date, nullable=False)
    attendance = db.Column(db.Boolean, default=False, nullable=False)
    video_watch = db.Column(db.Boolean, default=False, nullable=False)
    measurement = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            "recordDate": self.record_date.isoformat(),
            "attendance": bool(self.attendance),
            "videoWatch": bool(self.video_watch),
            "measurement": bool(self.measurement),
        }


class MyPage(db.Model):
    __tablename__ = "mypage"

    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), primary_key=True)
    badge_info = db.Column(db.String(100), nullable=False, default="")
