# backend/fitkeeper/models/directory.py
#
# Read-only directory tables loaded from public data sets; the upper-case
# column names are the data sets' own.
from datetime import datetime
from .. import db


class ClubInfo(db.Model):
    __tablename__ = "club_info"

    id = db.Column(db.Integer, primary_key=True)
    club_name = db.Column("CLUB_NM", db.String(200))
    sido_name = db.Column("CTPRVN_NM", db.String(50))
    sigungu_name = db.Column("SIGNGU_NM", db.String(50))
    item_name = db.Column("ITEM_NM", db.String(100))
    item_class_name = db.Column("ITEM_CL_NM", db.String(100))
    gender_type = db.Column("SEXDSTN_FLAG_NM", db.String(20))
    member_count = db.Column("MBER_CO", db.Integer)
    founded_date = db.Column("FOND_DE", db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "clubName": self.club_name,
            "sidoName": self.sido_name,
            "sigunguName": self.sigungu_name,
            "itemName": self.item_name,
            "itemClassName": self.item_class_name,
            "genderType": self.gender_type,
            "memberCount": self.member_count,
            "foundedDate": self.founded_date,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class SportsFacility(db.Model):
    __tablename__ = "sports_facility"

    id = db.Column(db.Integer, primary_key=True)
    facility_name = db.Column("FCLTY_NM", db.String(200))
    facility_type = db.Column("FCLTY_TY_NM", db.String(100))
    state_value = db.Column("FCLTY_STATE_VALUE", db.String(50))
    zip_code = db.Column("ROAD_NM_ZIP_NO", db.String(10))
    address_main = db.Column("RDNMADR_ONE_NM", db.String(255))
    address_detail = db.Column("RDNMADR_TWO_NM", db.String(255))
    tel_no = db.Column("FCLTY_TEL_NO", db.String(50))
    sido_name = db.Column("POSESN_MBY_CTPRVN_NM", db.String(50))
    sigungu_name = db.Column("POSESN_MBY_SIGNGU_NM", db.String(50))
    latitude = db.Column("FCLTY_LA", db.Float)
    longitude = db.Column("FCLTY_LO", db.Float)
    deleted = db.Column("DEL_AT", db.String(1))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "facilityName": self.facility_name,
            "facilityType": self.facility_type,
            "stateValue": self.state_value,
            "zipCode": self.zip_code,
            "addressMain": self.address_main,
            "addressDetail": self.address_detail,
            "telNo": self.tel_no,
            "sidoName": self.sido_name,
            "sigunguName": self.sigungu_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
