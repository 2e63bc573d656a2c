# backend/fitkeeper/services/identity.py
from typing import Optional, Tuple

from flask_jwt_extended import create_access_token, get_jwt_identity
from sqlalchemy.exc import IntegrityError

from .. import db
from ..errors import AuthenticationError, ValidationError
from ..models.user import PROVIDERS, User


def issue_token(user: User) -> str:
    return create_access_token(
        identity=str(user.id),
        additional_claims={"provider": user.provider, "provider_id": user.provider_id},
    )


def _find(provider: str, provider_id: str) -> Optional[User]:
    return User.query.filter_by(provider=provider, provider_id=provider_id).first()


def resolve_user(
    provider: Optional[str],
    provider_id,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> Tuple[User, str]:
    """
    Find-or-create the user for (provider, provider_id) and issue a token.

    Email / name are refreshed when they changed; a missing new value keeps
    the stored one.
    """
    if not provider or provider_id in (None, ""):
        raise ValidationError("provider and provider_id are required")
    if provider not in PROVIDERS:
        raise ValidationError(
            f"unsupported provider '{provider}', supported: {', '.join(PROVIDERS)}"
        )
    provider_id = str(provider_id)

    user = _find(provider, provider_id)
    if user is None:
        user = User(provider=provider, provider_id=provider_id, email=email, name=name)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            # another request created the same identity first
            db.session.rollback()
            user = _find(provider, provider_id)

    if (email and email != user.email) or (name and name != user.name):
        user.email = email or user.email
        user.name = name or user.name
        db.session.commit()

    return user, issue_token(user)


def current_user() -> User:
    """The user behind the verified bearer token (call under @jwt_required)."""
    user_id = int(get_jwt_identity())
    user = db.session.get(User, user_id)
    if user is None:
        raise AuthenticationError("user for this token no longer exists")
    return user
