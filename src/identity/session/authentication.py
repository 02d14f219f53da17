"""Authentication service: registration, login, logout and session lookup.

Passwords are hashed here, before any command is built, because processed
commands are journaled by the domain.
"""

import json
from datetime import timedelta

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.session.session import UserSession
from identity.shared.password import hash_password, verify_password
from identity.user.registration import RegisterUser
from identity.user.user import User
from shared.exceptions import AuthenticationFailure
from shared.settings import get_settings

logger = structlog.get_logger(__name__)


@identity.command(part_of="UserSession")
class StartSession:
    user_id: Identifier(required=True)


@identity.command(part_of="UserSession")
class EndSession:
    session_id: Identifier(required=True)


@identity.command_handler(part_of=UserSession)
class ManageSessionHandler:
    @handle(StartSession)
    def start_session(self, command):
        ttl = timedelta(days=get_settings().session_ttl_days)
        session = UserSession.start(user_id=command.user_id, ttl=ttl)
        current_domain.repository_for(UserSession).add(session)
        return session.session_id

    @handle(EndSession)
    def end_session(self, command):
        repo = current_domain.repository_for(UserSession)
        try:
            session = repo.get(command.session_id)
        except ObjectNotFoundError:
            return
        session.revoke()
        repo.add(session)


def register_user(
    username: str,
    password: str,
    confirm_password: str | None,
    email: str,
    name: str,
    phone: str,
    address: dict | None = None,
) -> User:
    """Create an account and return it.

    Raises ``ValidationError`` for missing or malformed input and
    ``ConflictError`` when the username or email is taken. An invalid
    ``address`` is logged and ignored.
    """
    if not password:
        raise ValidationError({"password": ["is required"]})
    if confirm_password is not None and password != confirm_password:
        raise ValidationError({"confirm_password": ["Passwords do not match"]})

    user_id = current_domain.process(
        RegisterUser(
            username=username,
            password_hash=hash_password(password),
            email=email,
            name=name,
            phone=phone,
            address=json.dumps(address) if address else None,
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(User).get(user_id)


def start_session(user_id) -> str:
    """Open a session for ``user_id`` and return its opaque identifier."""
    return current_domain.process(StartSession(user_id=str(user_id)), asynchronous=False)


def login(username: str, password: str) -> tuple[User, str]:
    """Verify credentials and open a session.

    Returns the user and the new session identifier; raises
    ``AuthenticationFailure`` when the username is unknown or the password does
    not match.
    """
    user = current_domain.repository_for(User).find_by_username(username)
    if not verify_password(password, user.password_hash if user else None):
        logger.info("login_failed", username=username)
        raise AuthenticationFailure()

    session_id = start_session(user.id)
    logger.info("login_succeeded", user_id=str(user.id))
    return user, session_id


def logout(session_id: str | None) -> None:
    if session_id:
        current_domain.process(EndSession(session_id=session_id), asynchronous=False)


def current_user(session_id: str | None) -> User | None:
    """Resolve the user behind a session id.

    ``None`` when the id is missing, unknown, revoked or expired, or when the
    user no longer exists.
    """
    if not session_id:
        return None

    try:
        session = current_domain.repository_for(UserSession).get(session_id)
    except ObjectNotFoundError:
        return None

    if not session.is_active():
        return None

    try:
        return current_domain.repository_for(User).get(session.user_id)
    except ObjectNotFoundError:
        return None
