"""
Provide methods for working with user accounts.

These functions play the part of the credential store: they own password
hashing, token issue and verification, and role membership. Mutating
operations report validation problems as a :class:`.domain.IdentityResult`
rather than raising, so that callers can decide how to surface them.
Database errors propagate.
"""

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from ..context import get_application_config
from ..domain import IdentityError, IdentityResult
from . import passwords, tokens, util
from .exceptions import InvalidToken, PasswordAuthenticationFailed
from .models import DBRole, DBUser, new_id

logger = logging.getLogger(__name__)

ALLOWED_USERNAME_CHARACTERS = frozenset(
    'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@+'
)

INVALID_TOKEN = IdentityError('InvalidToken', 'Недействительный токен.')
CONCURRENCY_FAILURE = IdentityError(
    'ConcurrencyFailure',
    'Ошибка оптимистичной блокировки: объект был изменён.'
)


def _normalize(value: Optional[str]) -> Optional[str]:
    return value.upper() if value is not None else None


def find_by_id(user_id: str) -> Optional[DBUser]:
    """Get a user by id, or ``None``."""
    with util.transaction() as session:
        return session.get(DBUser, user_id)


def find_by_name(username: str) -> Optional[DBUser]:
    """Get a user by (case-insensitive) username, or ``None``."""
    with util.transaction() as session:
        return (
            session.query(DBUser)
            .filter(DBUser.normalized_username == _normalize(username))
            .first()
        )


def find_by_email(email: str) -> Optional[DBUser]:
    """Get a user by (case-insensitive) email address, or ``None``."""
    with util.transaction() as session:
        return (
            session.query(DBUser)
            .filter(DBUser.normalized_email == _normalize(email))
            .first()
        )


def find_by_phone_number(phone_number: str) -> Optional[DBUser]:
    """Get a user by exact phone number, or ``None``."""
    with util.transaction() as session:
        return (
            session.query(DBUser)
            .filter(DBUser.phone_number == phone_number)
            .first()
        )


def _validate_user(user: DBUser) -> List[IdentityError]:
    errors: List[IdentityError] = []
    if not user.username or \
            any(c not in ALLOWED_USERNAME_CHARACTERS for c in user.username):
        errors.append(IdentityError(
            'InvalidUserName',
            f"Имя пользователя '{user.username}' недопустимо."
        ))
        return errors
    owner = find_by_name(user.username)
    if owner is not None and owner.user_id != user.user_id:
        errors.append(IdentityError(
            'DuplicateUserName',
            f"Имя пользователя '{user.username}' уже занято."
        ))
    return errors


def create(user: DBUser, password: Optional[str] = None) -> IdentityResult:
    """
    Persist a new user.

    Parameters
    ----------
    user : :class:`.DBUser`
        An unsaved user. ``user_id`` is assigned if it is not set.
    password : str
        Optional; guests are created without one.

    Returns
    -------
    :class:`.domain.IdentityResult`

    """
    errors = _validate_user(user)
    if password is not None:
        errors += passwords.validate_password(password,
                                              get_application_config())
    if errors:
        return IdentityResult.failed(*errors)

    if not user.user_id:
        user.user_id = new_id()
    user.normalized_username = _normalize(user.username)
    user.normalized_email = _normalize(user.email)
    user.security_stamp = new_id()
    if password is not None:
        user.password_hash = passwords.hash_password(password)

    try:
        with util.transaction() as session:
            session.add(user)
    except IntegrityError as e:
        logger.debug('Could not create user %s: %s', user.username, e)
        return IdentityResult.failed(IdentityError(
            'DuplicateUserName',
            f"Имя пользователя '{user.username}' уже занято."
        ))
    logger.debug('Created user %s', user.user_id)
    return IdentityResult.success()


def update(user: DBUser) -> IdentityResult:
    """
    Persist changes to an existing user.

    A write against a row that someone else changed since it was loaded is
    rejected with a ``ConcurrencyFailure`` error.
    """
    user.normalized_username = _normalize(user.username)
    user.normalized_email = _normalize(user.email)
    try:
        with util.transaction() as session:
            session.add(user)
            session.commit()
    except StaleDataError as e:
        logger.warning('Concurrent update of user %s: %s', user.user_id, e)
        return IdentityResult.failed(CONCURRENCY_FAILURE)
    return IdentityResult.success()


def get_roles(user: DBUser) -> List[str]:
    """Names of the roles to which ``user`` belongs."""
    return [role.name for role in user.roles]


def is_in_role(user: DBUser, role_name: str) -> bool:
    """Determine whether ``user`` belongs to the named role."""
    return any(role.normalized_name == _normalize(role_name)
               for role in user.roles)


def add_to_role(user: DBUser, role_name: str) -> IdentityResult:
    """Add ``user`` to an existing role."""
    if is_in_role(user, role_name):
        return IdentityResult.failed(IdentityError(
            'UserAlreadyInRole',
            f"Пользователь уже в роли '{role_name}'."
        ))
    with util.transaction() as session:
        role = (
            session.query(DBRole)
            .filter(DBRole.normalized_name == _normalize(role_name))
            .first()
        )
        if role is None:
            return IdentityResult.failed(IdentityError(
                'InvalidRoleName',
                f"Роль '{role_name}' не существует."
            ))
        user.roles.append(role)
    return update(user)


def force_password(user: DBUser, password: str) -> None:
    """
    Replace the password hash without applying the password policy.

    Rotates the security stamp. Does not persist; call :func:`update`.
    """
    user.password_hash = passwords.hash_password(password)
    user.security_stamp = new_id()


def is_locked_out(user: DBUser) -> bool:
    """Determine whether ``user`` is currently locked out."""
    lockout_end = util.as_utc(user.lockout_end)
    return bool(user.lockout_enabled) and lockout_end is not None \
        and lockout_end > util.now()


def check_password(user: DBUser, password: str) -> bool:
    """
    Verify a password, keeping track of failed attempts.

    Each failure increments the access-failed counter; reaching the configured
    maximum locks the account for ``LOCKOUT_DURATION`` seconds and resets the
    counter. A success resets the counter. Locked-out users always fail.
    """
    if user.password_hash is None or is_locked_out(user):
        return False
    config = get_application_config()
    try:
        passwords.check_password(password, user.password_hash)
    except PasswordAuthenticationFailed:
        user.access_failed_count = (user.access_failed_count or 0) + 1
        maximum = int(config.get('LOCKOUT_MAX_FAILED_ACCESS_ATTEMPTS', 5))
        if user.lockout_enabled and user.access_failed_count >= maximum:
            duration = int(config.get('LOCKOUT_DURATION', 300))
            user.lockout_end = util.now() + timedelta(seconds=duration)
            user.access_failed_count = 0
            logger.info('UserID: %s. Locked out after %i failures',
                        user.user_id, maximum)
        update(user)
        return False
    if user.access_failed_count:
        user.access_failed_count = 0
        update(user)
    return True


def _issue(user: DBUser, purpose: str) -> str:
    config = get_application_config()
    return tokens.encode(user.user_id, purpose, user.security_stamp,
                         config['TOKEN_SECRET'],
                         int(config.get('TOKEN_LIFESPAN', 86400)))


def _verify(user: DBUser, token: str, purpose: str) -> bool:
    config = get_application_config()
    try:
        tokens.verify(token, user.user_id, purpose, user.security_stamp,
                      config['TOKEN_SECRET'])
    except InvalidToken as e:
        logger.debug('UserID: %s. Rejected %s token: %s', user.user_id,
                     purpose, e)
        return False
    return True


def generate_email_confirmation_token(user: DBUser) -> str:
    """Issue a token that confirms the user's email address."""
    return _issue(user, tokens.EMAIL_CONFIRMATION)


def confirm_email(user: DBUser, token: str) -> IdentityResult:
    """Mark the email address confirmed if ``token`` checks out."""
    if not _verify(user, token, tokens.EMAIL_CONFIRMATION):
        return IdentityResult.failed(INVALID_TOKEN)
    user.email_confirmed = True
    return update(user)


def is_email_confirmed(user: DBUser) -> bool:
    """Determine whether the user's email address is confirmed."""
    return bool(user.email_confirmed)


def generate_password_reset_token(user: DBUser) -> str:
    """Issue a token that authorizes a password reset."""
    return _issue(user, tokens.RESET_PASSWORD)


def reset_password(user: DBUser, token: str,
                   new_password: str) -> IdentityResult:
    """Set a new password, provided the reset token and password are valid."""
    if not _verify(user, token, tokens.RESET_PASSWORD):
        return IdentityResult.failed(INVALID_TOKEN)
    errors = passwords.validate_password(new_password,
                                         get_application_config())
    if errors:
        return IdentityResult.failed(*errors)
    force_password(user, new_password)
    user.access_failed_count = 0
    user.lockout_end = None
    return update(user)


def generate_change_phone_number_token(user: DBUser,
                                       phone_number: str) -> str:
    """Generate a six-digit code bound to ``phone_number``."""
    config = get_application_config()
    return tokens.generate_phone_code(
        user.security_stamp,
        tokens.phone_modifier(tokens.CHANGE_PHONE_NUMBER, phone_number),
        int(config.get('PHONE_CODE_TIMESTEP', 180))
    )


def verify_change_phone_number_token(user: DBUser, code: str,
                                     phone_number: str) -> bool:
    """Check a code from :func:`generate_change_phone_number_token`."""
    config = get_application_config()
    return tokens.verify_phone_code(
        code,
        user.security_stamp,
        tokens.phone_modifier(tokens.CHANGE_PHONE_NUMBER, phone_number),
        int(config.get('PHONE_CODE_TIMESTEP', 180)),
        int(config.get('PHONE_CODE_VARIANCE', 2))
    )


def is_phone_number_confirmed(user: DBUser) -> bool:
    """Determine whether the user's phone number is confirmed."""
    return bool(user.phone_number_confirmed)
