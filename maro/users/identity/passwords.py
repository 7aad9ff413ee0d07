"""Password hashing and password policy."""

import hashlib
import logging
import secrets
from base64 import b64encode, b64decode
import binascii
from typing import Any, List, Mapping

from ..context import as_bool
from ..domain import IdentityError
from .exceptions import PasswordAuthenticationFailed

logger = logging.getLogger(__name__)

ITERATIONS = 100_000
SALT_LENGTH = 16


def _hash_salt_and_password(salt: bytes, password: str) -> bytes:
    return hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt,
                               ITERATIONS)


def hash_password(password: str) -> str:
    """Generate a salted hash of a password."""
    salt = secrets.token_bytes(SALT_LENGTH)
    hashed = _hash_salt_and_password(salt, password)
    return b64encode(salt + hashed).decode('ascii')


def check_password(password: str, encrypted: str) -> bool:
    """
    Check a password against an encrypted hash.

    Raises
    ------
    :class:`PasswordAuthenticationFailed`
        If the password does not match, or the hash is unreadable.

    """
    try:
        decoded = b64decode(encrypted.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise PasswordAuthenticationFailed('Unreadable password hash') from e
    salt = decoded[:SALT_LENGTH]
    enc_hashed = decoded[SALT_LENGTH:]
    pass_hashed = _hash_salt_and_password(salt, password)
    if not secrets.compare_digest(pass_hashed, enc_hashed):
        raise PasswordAuthenticationFailed('Incorrect password')
    return True


def _is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def _is_lower(c: str) -> bool:
    return 'a' <= c <= 'z'


def _is_upper(c: str) -> bool:
    return 'A' <= c <= 'Z'


def validate_password(password: str,
                      config: Mapping[str, Any]) -> List[IdentityError]:
    """
    Check ``password`` against the configured password policy.

    Returns every violated rule, in a fixed order, so that callers can report
    the first one.
    """
    errors: List[IdentityError] = []
    required_length = int(config.get('PASSWORD_REQUIRED_LENGTH', 6))
    if not password or len(password) < required_length:
        errors.append(IdentityError(
            'PasswordTooShort',
            f'Пароль должен содержать не менее {required_length} символов.'
        ))
        if not password:
            return errors

    if as_bool(config.get('PASSWORD_REQUIRE_NON_ALPHANUMERIC', False)) \
            and all(_is_digit(c) or _is_lower(c) or _is_upper(c)
                    for c in password):
        errors.append(IdentityError(
            'PasswordRequiresNonAlphanumeric',
            'Пароль должен содержать хотя бы один специальный символ.'
        ))
    if as_bool(config.get('PASSWORD_REQUIRE_DIGIT', True)) \
            and not any(_is_digit(c) for c in password):
        errors.append(IdentityError(
            'PasswordRequiresDigit',
            'Пароль должен содержать хотя бы одну цифру.'
        ))
    if as_bool(config.get('PASSWORD_REQUIRE_LOWERCASE', True)) \
            and not any(_is_lower(c) for c in password):
        errors.append(IdentityError(
            'PasswordRequiresLower',
            'Пароль должен содержать хотя бы одну строчную букву.'
        ))
    if as_bool(config.get('PASSWORD_REQUIRE_UPPERCASE', True)) \
            and not any(_is_upper(c) for c in password):
        errors.append(IdentityError(
            'PasswordRequiresUpper',
            'Пароль должен содержать хотя бы одну заглавную букву.'
        ))
    if errors:
        logger.debug('Password rejected: %s',
                     ', '.join(error.code for error in errors))
    return errors
