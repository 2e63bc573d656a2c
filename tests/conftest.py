import math
import sqlite3
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy.pool import StaticPool

from config import Config
from fitkeeper import create_app, db
from fitkeeper.models import Card, User
from fitkeeper.services.recommender import Recommendation
from fitkeeper.services.text_generator import RecipeText


def _nullable(fn):
    return lambda *args: None if any(a is None for a in args) else fn(*args)


def _connect():
    # SQLite has no trig functions; the facility distance query needs them
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.create_function("radians", 1, _nullable(math.radians))
    conn.create_function("cos", 1, _nullable(math.cos))
    conn.create_function("sin", 1, _nullable(math.sin))
    conn.create_function("acos", 1, _nullable(lambda x: math.acos(max(-1.0, min(1.0, x)))))
    return conn


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {"creator": _connect, "poolclass": StaticPool}
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    APP_ENV = "test"
    FRONTEND_URL = "http://front.test"
    BACKEND_URL = "http://api.test"
    KAKAO_CLIENT_ID = "kakao-client"
    KAKAO_CLIENT_SECRET = "kakao-secret"
    NAVER_CLIENT_ID = None
    GOOGLE_CLIENT_ID = None
    AI_SERVER_URL = None
    OPENAI_API_KEY = None


class FakeRecommender:
    def __init__(self, recommendation=None):
        self.recommendation = recommendation or Recommendation(
            warm_up=["Jumping Jacks", "Arm Circles"],
            main=["Squat", "Squat", "Plank", "Unknown Move"],
            cool_down=["Hamstring Stretch", "Jumping Jacks"],
            fitness_grade="B",
            fitness_score=72.5,
        )
        self.calls = []

    def recommend(self, age_group, age, gender, items, features=None):
        self.calls.append(
            {"age_group": age_group, "age": age, "gender": gender, "items": items}
        )
        return self.recommendation


class FakeTextGenerator:
    def __init__(self, title="Morning Power Routine", intro="A balanced routine for you."):
        self.text = RecipeText(title=title, intro=intro)
        self.calls = []

    def generate(self, **context):
        self.calls.append(context)
        return self.text


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def recommender(app):
    fake = FakeRecommender()
    app.extensions["recommender"] = fake
    return fake


@pytest.fixture
def text_generator(app):
    fake = FakeTextGenerator()
    app.extensions["text_generator"] = fake
    return fake


def make_user(app, provider="kakao", provider_id="1001", **fields):
    with app.app_context():
        user = User(provider=provider, provider_id=provider_id, **fields)
        db.session.add(user)
        db.session.commit()
        return user.id


def auth_headers(app, user_id, expires_delta=None):
    with app.app_context():
        token = create_access_token(identity=str(user_id), expires_delta=expires_delta)
    return {"Authorization": f"Bearer {token}"}


def expired_headers(app, user_id):
    return auth_headers(app, user_id, expires_delta=timedelta(seconds=-30))


CARDS = [
    (1, "Jumping Jacks", "1:00"),
    (2, "Arm Circles", "0:45"),
    (3, "Squat", "27:30:00"),
    (4, "Plank", "2:00"),
    (5, "Hamstring Stretch", "1:30"),
    (6, "Squat", "5:00"),
    (7, "Full Body Stretching", "3:00"),
    (8, "Aerobic Exercise", "10:00"),
    (9, "Strength Training", "12:00"),
]


def seed_cards(app, cards=CARDS):
    with app.app_context():
        for card_id, name, duration in cards:
            db.session.add(Card(id=card_id, exercise_name=name, video_duration=duration))
        db.session.commit()


ADULT_MEASUREMENTS = [
    {"measure_key": "53", "measure_value": "34"},
    {"measure_key": "54", "measure_value": "male"},
    {"measure_key": "1", "measure_value": "172.5"},
    {"measure_key": "2", "measure_value": "68"},
    {"measure_key": "6", "measure_value": "41.2"},
]
