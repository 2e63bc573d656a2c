# backend/fitkeeper/services/oauth.py
"""
Authorization-code login against Kakao, Naver and Google.

Only the two calls this service needs are implemented: exchanging the code
for an access token and reading the profile behind it.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import urlencode

import requests

from ..errors import UpstreamAuthError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuthProfile:
    provider: str
    provider_id: str
    email: Optional[str]
    name: Optional[str]


def _kakao_profile(data: dict) -> OAuthProfile:
    provider_id = str(data["id"])
    account = data.get("kakao_account") or {}
    nickname = (account.get("profile") or {}).get("nickname") or (
        data.get("properties") or {}
    ).get("nickname")
    return OAuthProfile(
        provider="kakao",
        provider_id=provider_id,
        email=account.get("email"),
        name=nickname or f"kakao_user_{provider_id[-4:]}",
    )


def _naver_profile(data: dict) -> OAuthProfile:
    response = data["response"]
    return OAuthProfile(
        provider="naver",
        provider_id=str(response["id"]),
        email=response.get("email"),
        name=response.get("name") or response.get("nickname"),
    )


def _google_profile(data: dict) -> OAuthProfile:
    return OAuthProfile(
        provider="google",
        provider_id=str(data["sub"]),
        email=data.get("email"),
        name=data.get("name"),
    )


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    authorize_url: str
    token_url: str
    profile_url: str
    scope: str
    to_profile: Callable[[dict], OAuthProfile]


PROVIDER_SPECS: Dict[str, ProviderSpec] = {
    "kakao": ProviderSpec(
        name="kakao",
        authorize_url="https://kauth.kakao.com/oauth/authorize",
        token_url="https://kauth.kakao.com/oauth/token",
        profile_url="https://kapi.kakao.com/v2/user/me",
        scope="profile_nickname account_email",
        to_profile=_kakao_profile,
    ),
    "naver": ProviderSpec(
        name="naver",
        authorize_url="https://nid.naver.com/oauth2.0/authorize",
        token_url="https://nid.naver.com/oauth2.0/token",
        profile_url="https://openapi.naver.com/v1/nid/me",
        scope="name email",
        to_profile=_naver_profile,
    ),
    "google": ProviderSpec(
        name="google",
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        profile_url="https://openidconnect.googleapis.com/v1/userinfo",
        scope="openid email profile",
        to_profile=_google_profile,
    ),
}


@dataclass(frozen=True)
class ProviderCredentials:
    client_id: Optional[str]
    client_secret: Optional[str]
    redirect_uri: str


class OAuthClient:
    def __init__(self, credentials: Dict[str, ProviderCredentials], timeout: float = 10.0):
        self.credentials = credentials
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "OAuthClient":
        backend_url = (config.get("BACKEND_URL") or "http://localhost:3001").rstrip("/")
        credentials = {}
        for name in PROVIDER_SPECS:
            prefix = name.upper()
            credentials[name] = ProviderCredentials(
                client_id=config.get(f"{prefix}_CLIENT_ID"),
                client_secret=config.get(f"{prefix}_CLIENT_SECRET"),
                redirect_uri=config.get(f"{prefix}_REDIRECT_URI")
                or f"{backend_url}/api/auth/{name}/callback",
            )
        return cls(credentials, timeout=float(config.get("OAUTH_TIMEOUT_SECONDS") or 10))

    def _spec(self, provider: str):
        spec = PROVIDER_SPECS.get(provider)
        if spec is None:
            raise ValidationError(
                f"unsupported provider '{provider}', supported: {', '.join(PROVIDER_SPECS)}"
            )
        return spec, self.credentials[provider]

    def is_configured(self, provider: str) -> bool:
        _spec, creds = self._spec(provider)
        return bool(creds.client_id)

    def authorize_url(self, provider: str, state: str) -> str:
        spec, creds = self._spec(provider)
        query = urlencode(
            {
                "client_id": creds.client_id,
                "redirect_uri": creds.redirect_uri,
                "response_type": "code",
                "scope": spec.scope,
                "state": state,
            }
        )
        return f"{spec.authorize_url}?{query}"

    def exchange_code(self, provider: str, code: str, state: Optional[str] = None) -> str:
        spec, creds = self._spec(provider)
        form = {
            "grant_type": "authorization_code",
            "client_id": creds.client_id,
            "client_secret": creds.client_secret,
            "redirect_uri": creds.redirect_uri,
            "code": code,
        }
        if state:
            form["state"] = state
        try:
            resp = requests.post(
                spec.token_url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded;charset=utf-8"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            access_token = resp.json().get("access_token")
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"[oauth] {provider} token exchange failed: {e}")
            raise UpstreamAuthError(f"{provider} token exchange failed") from e

        if not access_token:
            raise UpstreamAuthError(f"{provider} returned no access token")
        return access_token

    def fetch_profile(self, provider: str, access_token: str) -> OAuthProfile:
        spec, _creds = self._spec(provider)
        try:
            resp = requests.get(
                spec.profile_url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return spec.to_profile(resp.json())
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning(f"[oauth] {provider} profile request failed: {e}")
            raise UpstreamAuthError(f"{provider} profile request failed") from e

    def login(self, provider: str, code: str, state: Optional[str] = None) -> OAuthProfile:
        return self.fetch_profile(provider, self.exchange_code(provider, code, state))
