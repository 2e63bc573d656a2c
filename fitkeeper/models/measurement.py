# backend/fitkeeper/models/measurement.py
from datetime import datetime
from .. import db


class Measurement(db.Model):
    """One measured item of a session; a session is all rows sharing measurement_uuid."""

    __tablename__ = "measurement"

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    measurement_uuid = db.Column("measurement_UUID", db.String(12), nullable=False)
    measurement_code = db.Column(db.String(50), nullable=False)
    measurement_data = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", backref="measurements")


db.Index("ix_measurement_user_uuid", Measurement.user_id, Measurement.measurement_uuid)


class MeasurementCode(db.Model):
    __tablename__ = "measurement_code"

    id = db.Column(db.Integer, primary_key=True)
    measurement_code_name = db.Column(db.String(100), nullable=False)
    guide_video = db.Column(db.String(255))

    def to_dict(self):
        return {
            "id": self.id,
            "measurement_code_name": self.measurement_code_name,
            "guide_video": self.guide_video,
        }
