from datetime import datetime, timedelta, timezone

import jwt
import pytest

from portal.auth import session_token
from portal.auth.sanitize import clean
from portal.auth.sessions import SessionRecord, SessionStore, sessions
from portal.core import config


def _record(key: str = 'abc123', minutes: int = 60) -> SessionRecord:
    return SessionRecord(
        key=key,
        roll='22111234',
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=minutes),
    )


def test_session_store_round_trip() -> None:
    store = SessionStore(max_age_minutes=60)

    record = store.create('22111234')

    assert store.get(record.key) == '22111234'
    assert len(store) == 1


def test_session_store_keys_are_unique_per_login() -> None:
    store = SessionStore(max_age_minutes=60)

    assert store.create('22111234').key != store.create('22111234').key


def test_session_store_expires_and_purges_records() -> None:
    store = SessionStore(max_age_minutes=0)

    record = store.create('22111234')

    assert store.get(record.key) is None
    assert len(store) == 0


def test_session_store_sweeps_abandoned_records_on_create() -> None:
    store = SessionStore(max_age_minutes=60)
    for _ in range(50):
        store.create('22111234')
    assert len(store) == 50

    for record in list(store._records.values()):
        record.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    fresh = store.create('lib001')

    assert len(store) == 1
    assert store.get(fresh.key) == 'lib001'


def test_session_store_purge_expired_empties_stale_records() -> None:
    store = SessionStore(max_age_minutes=0)
    store.create('22111234')
    store.create('lib001')

    store.purge_expired()

    assert len(store) == 0


def test_cookieless_logins_do_not_accumulate_after_expiry(client) -> None:
    for _ in range(20):
        client.cookies.clear()
        client.post('/login', data={'roll': '22111234', 'password': 'pass123'}, follow_redirects=False)
    assert len(sessions) == 20

    for record in list(sessions._records.values()):
        record.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    client.cookies.clear()
    client.post('/login', data={'roll': '22111234', 'password': 'pass123'}, follow_redirects=False)

    assert len(sessions) == 1


def test_session_store_destroy_is_idempotent() -> None:
    store = SessionStore(max_age_minutes=60)
    key = store.create('lib001').key

    store.destroy(key)
    store.destroy(key)

    assert store.get(key) is None


def test_session_token_round_trip() -> None:
    token = session_token.create_session_token(_record())

    assert session_token.decode_session_token(token) == 'abc123'


def test_session_token_expires_with_its_record() -> None:
    token = session_token.create_session_token(_record(minutes=-1))

    assert session_token.decode_session_token(token) is None


def test_session_token_rejects_tokens_of_another_type() -> None:
    token = jwt.encode(
        {'sub': 'abc123', 'typ': 'access', 'exp': datetime.now(timezone.utc) + timedelta(minutes=5)},
        config.SESSION_SECRET,
        algorithm=config.SESSION_ALGORITHM,
    )
    untyped = jwt.encode(
        {'sub': 'abc123', 'exp': datetime.now(timezone.utc) + timedelta(minutes=5)},
        config.SESSION_SECRET,
        algorithm=config.SESSION_ALGORITHM,
    )

    assert session_token.decode_session_token(token) is None
    assert session_token.decode_session_token(untyped) is None


def test_session_token_rejects_other_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    token = session_token.create_session_token(_record())
    monkeypatch.setattr(config, 'SESSION_SECRET', 'rotated-secret')

    assert session_token.decode_session_token(token) is None


def test_session_token_rejects_garbage() -> None:
    assert session_token.decode_session_token('garbage') is None


def test_login_cookie_is_http_only(login_as) -> None:
    response = login_as('student')

    cookie_header = response.headers['set-cookie'].lower()
    assert config.SESSION_COOKIE_NAME in cookie_header
    assert 'httponly' in cookie_header
    assert 'max-age=3600' in cookie_header


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [
        (None, ''),
        ('  22111234  ', '22111234'),
        ('<script>alert(1)</script>', 'alert(1)'),
        ('<b>Ann</b> O\'Brien', "Ann O'Brien"),
        ('Tom & Jerry "Co"', 'Tom & Jerry "Co"'),
        ('pass123', 'pass123'),
    ],
)
def test_clean_trims_and_strips_markup(raw, expected: str) -> None:
    assert clean(raw) == expected


def test_validate_runtime_config_requires_secret_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'IS_PRODUCTION', True)
    monkeypatch.setattr(config, 'SESSION_SECRET', 'change-me')

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_validate_runtime_config_allows_default_secret_in_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'IS_PRODUCTION', False)
    monkeypatch.setattr(config, 'SESSION_SECRET', 'change-me')

    config.validate_runtime_config()
