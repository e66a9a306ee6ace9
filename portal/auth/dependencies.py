import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from portal.auth.session_token import create_session_token, decode_session_token
from portal.auth.sessions import sessions
from portal.core import config
from portal.database import get_db
from portal.models.user import User
from portal.repositories import UserRepository

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised when a protected route is hit without a signed-in user."""


class AccessDenied(Exception):
    """Raised when the signed-in user's role is not allowed on a route."""

    def __init__(self, required_roles: tuple[str, ...], context: "RequestContext | None" = None):
        self.required_roles = required_roles
        self.context = context
        super().__init__(self.message)

    @property
    def message(self) -> str:
        roles = ' or '.join(self.required_roles)
        return f'Access Denied: You do not have {roles} permissions for this page.'


@dataclass
class RequestContext:
    path: str
    user: User | None = None
    session_key: str | None = None


def _session_key_from(request: Request) -> str | None:
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not token:
        return None
    return decode_session_token(token)


def resolve_context(request: Request, db: Session) -> RequestContext:
    context = RequestContext(path=request.url.path)
    session_key = _session_key_from(request)
    if session_key is None:
        return context

    roll = sessions.get(session_key)
    if roll is None:
        return context

    context.session_key = session_key
    context.user = UserRepository(db).get_by_roll(roll)
    return context


def get_request_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    return resolve_context(request, db)


def require_roles(*roles: str):
    def guard(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if context.user is None:
            raise LoginRequired()
        if context.user.role not in roles:
            logger.info('Denied %s (%s) on %s', context.user.roll, context.user.role, context.path)
            raise AccessDenied(roles, context)
        return context

    return guard


def start_session(response: Response, user: User, previous_key: str | None = None) -> None:
    if previous_key:
        sessions.destroy(previous_key)
    record = sessions.create(user.roll)
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=create_session_token(record),
        max_age=config.SESSION_MAX_AGE_MINUTES * 60,
        httponly=True,
        samesite='lax',
        secure=config.SESSION_COOKIE_SECURE,
    )


def end_session(response: Response, session_key: str | None) -> None:
    if session_key:
        sessions.destroy(session_key)
    response.delete_cookie(config.SESSION_COOKIE_NAME)
