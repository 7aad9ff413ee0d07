"""
Purpose-bound tokens issued by the credential store.

Email confirmation and password reset tokens are signed JWTs that carry the
user id, the purpose, and the user's security stamp at the time of issue.
Rotating the stamp (e.g. on password change) invalidates every outstanding
token for that user.

Phone codes are six-digit time-step HMAC codes (after RFC 6238) keyed by the
security stamp and bound to a purpose and a phone number. They are short
enough to read out of a text message.
"""

import hashlib
import hmac
import struct
import time
from typing import Optional

import jwt

from .exceptions import InvalidToken, ExpiredToken

EMAIL_CONFIRMATION = 'EmailConfirmation'
RESET_PASSWORD = 'ResetPassword'
CHANGE_PHONE_NUMBER = 'ChangePhoneNumber'

PHONE_CODE_LENGTH = 6


def encode(user_id: str, purpose: str, security_stamp: str, secret: str,
           lifespan: int) -> str:
    """Issue a signed token for ``purpose``."""
    issued = int(time.time())
    claims = {
        'sub': user_id,
        'purpose': purpose,
        'stamp': security_stamp,
        'iat': issued,
        'exp': issued + lifespan
    }
    return jwt.encode(claims, secret, algorithm='HS256')


def decode(token: str, secret: str) -> dict:
    """Verify the signature and expiry of a token and return its claims."""
    try:
        claims: dict = jwt.decode(token, secret, algorithms=['HS256'])
    except jwt.exceptions.ExpiredSignatureError as e:
        raise ExpiredToken('Token has expired') from e
    except jwt.exceptions.InvalidTokenError as e:
        raise InvalidToken('Not a valid token') from e
    return claims


def verify(token: str, user_id: str, purpose: str, security_stamp: str,
           secret: str) -> None:
    """
    Check that ``token`` was issued to this user, for this purpose.

    Raises
    ------
    :class:`InvalidToken`
        If the token does not check out. :class:`ExpiredToken` if it has
        expired.

    """
    claims = decode(token, secret)
    if claims.get('sub') != user_id:
        raise InvalidToken('Token issued to a different user')
    if claims.get('purpose') != purpose:
        raise InvalidToken('Token issued for a different purpose')
    if claims.get('stamp') != security_stamp:
        raise InvalidToken('Security stamp has changed')


def phone_modifier(purpose: str, phone_number: Optional[str]) -> str:
    """Bind a phone code to its purpose and destination number."""
    return f'{purpose}:{phone_number or ""}'


def _compute_code(key: bytes, step: int, modifier: str) -> str:
    mac = hmac.new(key, struct.pack('>Q', step) + modifier.encode('utf-8'),
                   hashlib.sha1).digest()
    offset = mac[-1] & 0x0F
    binary = struct.unpack('>I', mac[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(binary % 10 ** PHONE_CODE_LENGTH).zfill(PHONE_CODE_LENGTH)


def generate_phone_code(security_stamp: str, modifier: str, timestep: int,
                        at: Optional[float] = None) -> str:
    """Generate the six-digit code for the current time step."""
    at = time.time() if at is None else at
    return _compute_code(security_stamp.encode('utf-8'), int(at // timestep),
                         modifier)


def verify_phone_code(code: str, security_stamp: str, modifier: str,
                      timestep: int, variance: int = 2,
                      at: Optional[float] = None) -> bool:
    """Check ``code`` against the steps within ``variance`` of now."""
    at = time.time() if at is None else at
    step = int(at // timestep)
    key = security_stamp.encode('utf-8')
    return any(
        hmac.compare_digest(_compute_code(key, step + offset, modifier), code)
        for offset in range(-variance, variance + 1)
    )
