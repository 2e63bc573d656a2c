# backend/config.py
import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/fitkeeper"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "development" exposes internal error detail in 500 responses
    APP_ENV = os.environ.get("APP_ENV", "production")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # 🔐 JWT config
    JWT_TOKEN_LOCATION = ["headers"]     # where to look for tokens
    JWT_HEADER_NAME = "Authorization"    # header name
    JWT_HEADER_TYPE = "Bearer"           # expected prefix
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        days=int(os.environ.get("JWT_EXPIRES_DAYS", "7"))
    )

    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5173")
    BACKEND_URL = os.environ.get("BACKEND_URL", "http://localhost:3001")

    # OAuth providers (redirect URIs must match the provider console exactly)
    KAKAO_CLIENT_ID = os.environ.get("KAKAO_CLIENT_ID")
    KAKAO_CLIENT_SECRET = os.environ.get("KAKAO_CLIENT_SECRET")
    KAKAO_REDIRECT_URI = os.environ.get("KAKAO_REDIRECT_URI")

    NAVER_CLIENT_ID = os.environ.get("NAVER_CLIENT_ID")
    NAVER_CLIENT_SECRET = os.environ.get("NAVER_CLIENT_SECRET")
    NAVER_REDIRECT_URI = os.environ.get("NAVER_REDIRECT_URI")

    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET")
    GOOGLE_REDIRECT_URI = os.environ.get("GOOGLE_REDIRECT_URI")

    OAUTH_TIMEOUT_SECONDS = float(os.environ.get("OAUTH_TIMEOUT_SECONDS", "10"))

    # Recommendation service ("items" or "features" payload)
    AI_SERVER_URL = os.environ.get("AI_SERVER_URL")
    AI_SERVER_MODE = os.environ.get("AI_SERVER_MODE", "items")
    AI_SERVER_TIMEOUT_SECONDS = float(os.environ.get("AI_SERVER_TIMEOUT_SECONDS", "30"))

    # Recipe title / intro generation
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
    OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
