from urllib.parse import parse_qs, urlparse

from sqlalchemy.exc import OperationalError

from fitkeeper import db
from fitkeeper.errors import UpstreamAuthError
from fitkeeper.models import GrassHistory, User
from fitkeeper.services import attendance as attendance_module
from fitkeeper.services.oauth import OAuthClient, OAuthProfile, _kakao_profile

from conftest import auth_headers, expired_headers, make_user


def _authenticate(client, **body):
    payload = {"provider": "kakao", "provider_id": "555", "email": "a@x.com", "name": "Kim"}
    payload.update(body)
    return client.post("/api/auth/authenticate", json=payload)


def test_same_identity_twice_yields_one_user(app, client):
    first = _authenticate(client)
    second = _authenticate(client, name="Kim Minsu")

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.get_json()["token"]
    assert second.get_json()["name"] == "Kim Minsu"
    with app.app_context():
        users = User.query.filter_by(provider="kakao", provider_id="555").all()
        assert len(users) == 1
        assert users[0].name == "Kim Minsu"
        assert users[0].email == "a@x.com"


def test_missing_value_keeps_stored_profile(app, client):
    _authenticate(client)
    _authenticate(client, email=None, name="")
    with app.app_context():
        user = User.query.filter_by(provider_id="555").one()
        assert (user.email, user.name) == ("a@x.com", "Kim")


def test_authenticate_validation(client):
    assert _authenticate(client, provider="facebook").status_code == 400
    resp = _authenticate(client, provider_id="")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_token_identifies_user(app, client):
    token = _authenticate(client).get_json()["token"]
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["email"] == "a@x.com"


def test_missing_invalid_and_expired_tokens(app, client):
    user_id = make_user(app)

    missing = client.get("/api/auth/me")
    invalid = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
    expired = client.get("/api/auth/me", headers=expired_headers(app, user_id))

    assert [r.status_code for r in (missing, invalid, expired)] == [401, 401, 401]
    assert missing.get_json()["reason"] == "missing"
    assert invalid.get_json()["reason"] == "invalid"
    assert expired.get_json()["reason"] == "expired"


def test_token_for_deleted_user_is_rejected(app, client):
    resp = client.get("/api/auth/me", headers=auth_headers(app, 9999))
    assert resp.status_code == 401


def test_logout_always_succeeds(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True


def test_authorize_url(client):
    resp = client.get("/api/auth/kakao")
    assert resp.status_code == 200
    url = urlparse(resp.get_json()["authUrl"])
    query = parse_qs(url.query)
    assert url.netloc == "kauth.kakao.com"
    assert query["client_id"] == ["kakao-client"]
    assert query["redirect_uri"] == ["http://api.test/api/auth/kakao/callback"]
    assert query["state"][0]


def test_authorize_url_for_unconfigured_provider(client):
    assert client.get("/api/auth/google").status_code == 500
    assert client.get("/api/auth/myspace").status_code == 400


class StubOAuth(OAuthClient):
    def __init__(self, profile=None, error=None):
        super().__init__({})
        self.profile = profile
        self.error = error

    def login(self, provider, code, state=None):
        if self.error:
            raise self.error
        return self.profile


def test_callback_redirects_with_token(app, client):
    app.extensions["oauth_client"] = StubOAuth(
        OAuthProfile(provider="kakao", provider_id="77", email="k@x.com", name="Lee")
    )
    resp = client.get("/api/auth/kakao/callback?code=abc&state=s1")

    assert resp.status_code == 302
    location = urlparse(resp.headers["Location"])
    query = parse_qs(location.query)
    assert f"{location.scheme}://{location.netloc}{location.path}" == "http://front.test/auth/callback"
    assert query["success"] == ["true"]
    assert query["email"] == ["k@x.com"]
    assert query["token"][0]

    with app.app_context():
        user = User.query.filter_by(provider_id="77").one()
        day = GrassHistory.query.filter_by(user_id=user.id).one()
        assert day.attendance is True


def test_callback_succeeds_when_attendance_cannot_be_saved(app, client, monkeypatch):
    app.extensions["oauth_client"] = StubOAuth(
        OAuthProfile(provider="kakao", provider_id="78", email="j@x.com", name="Jung")
    )

    def broken(*args, **kwargs):
        raise OperationalError("INSERT INTO grass_history", {}, Exception("database is locked"))

    monkeypatch.setattr(attendance_module, "mark_day", broken)

    resp = client.get("/api/auth/kakao/callback?code=abc")
    query = parse_qs(urlparse(resp.headers["Location"]).query)

    assert resp.status_code == 302
    assert query["success"] == ["true"]
    assert query["token"][0]
    with app.app_context():
        assert User.query.filter_by(provider_id="78").count() == 1
        assert GrassHistory.query.count() == 0


def test_callback_failure_redirects_with_error(app, client):
    app.extensions["oauth_client"] = StubOAuth(error=UpstreamAuthError("kakao token exchange failed"))
    resp = client.get("/api/auth/kakao/callback?code=abc")
    query = parse_qs(urlparse(resp.headers["Location"]).query)
    assert resp.status_code == 302
    assert query["success"] == ["false"]
    assert query["error"] == ["kakao token exchange failed"]

    cancelled = client.get("/api/auth/kakao/callback?error=access_denied")
    assert parse_qs(urlparse(cancelled.headers["Location"]).query)["success"] == ["false"]

    no_code = client.get("/api/auth/kakao/callback")
    assert parse_qs(urlparse(no_code.headers["Location"]).query)["success"] == ["false"]

    with app.app_context():
        assert db.session.query(User).count() == 0


def test_kakao_profile_fallback_name():
    profile = _kakao_profile({"id": 123456789, "kakao_account": {"email": "z@x.com"}})
    assert profile.provider_id == "123456789"
    assert profile.name == "kakao_user_6789"
