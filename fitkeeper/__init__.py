# backend/fitkeeper/__init__.py
import time
from datetime import datetime, timezone

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from config import Config

db = SQLAlchemy()
jwt = JWTManager()

__version__ = "1.0.0"


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: the web client calls /api/* with credentials
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("FRONTEND_URL") or "*"}},
        supports_credentials=True,
    )

    # -----------------------------
    # External collaborators (built once from config)
    # -----------------------------
    from .services.oauth import OAuthClient
    from .services.recommender import RecommendationClient
    from .services.text_generator import RecipeTextGenerator

    app.extensions["oauth_client"] = OAuthClient.from_config(app.config)
    app.extensions["recommender"] = RecommendationClient.from_config(app.config)
    app.extensions["text_generator"] = RecipeTextGenerator.from_config(app.config)
    app.extensions["started_at"] = time.time()

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "success": False,
                    "message": "Missing auth token",
                    "reason": "missing",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "success": False,
                    "message": "Invalid auth token",
                    "reason": "invalid",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return (
            jsonify(
                {"success": False, "message": "Token has expired", "reason": "expired"}
            ),
            401,
        )

    # -----------------------------
    # API error handlers
    # -----------------------------
    from .errors import ApiError, InternalError

    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        message = "Route not found" if err.code == 404 else err.description
        return jsonify({"success": False, "message": message}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {err}")
        payload = InternalError("Internal server error").to_dict()
        if app.config.get("APP_ENV") == "development":
            payload["detail"] = str(err)
        return jsonify(payload), 500

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from . import models  # noqa: F401  (registers every table)
    from .routes.auth_routes import auth_bp
    from .routes.measurement_routes import measurement_bp
    from .routes.recipe_routes import recipes_bp
    from .routes.exercise_routes import exercise_bp
    from .routes.mypage_routes import mypage_bp
    from .routes.club_routes import clubs_bp
    from .routes.facility_routes import facilities_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(measurement_bp, url_prefix="/api/measurement")
    app.register_blueprint(recipes_bp, url_prefix="/api/recipes")
    app.register_blueprint(exercise_bp, url_prefix="/api/exercise")
    app.register_blueprint(mypage_bp, url_prefix="/api/mypage")
    app.register_blueprint(clubs_bp, url_prefix="/api/clubs")
    app.register_blueprint(facilities_bp, url_prefix="/api/sports-facilities")

    @app.route("/")
    def index():
        return {
            "message": "National Fitness Keeper API Server",
            "version": __version__,
            "status": "running",
        }

    @app.route("/api/health")
    def health():
        return {
            "success": True,
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.time() - app.extensions["started_at"], 3),
        }

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        db.create_all()

    return app
