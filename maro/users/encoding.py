"""URL-safe transport encoding for tokens that travel inside links."""

import re
from base64 import urlsafe_b64encode, urlsafe_b64decode
import binascii

_ALPHABET = re.compile(r'^[A-Za-z0-9_-]*$')


def encode(token: str) -> str:
    """Encode ``token`` as unpadded URL-safe base64 over its UTF-8 bytes."""
    return urlsafe_b64encode(token.encode('utf-8')).rstrip(b'=').decode('ascii')


def decode(encoded: str) -> str:
    """
    Reverse :func:`encode`.

    Raises
    ------
    ValueError
        If ``encoded`` is not unpadded URL-safe base64 of UTF-8 text.

    """
    if not _ALPHABET.match(encoded) or len(encoded) % 4 == 1:
        raise ValueError('Not a URL-safe base64 string')
    padded = encoded + '=' * (-len(encoded) % 4)
    try:
        return urlsafe_b64decode(padded.encode('ascii')).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError('Not a URL-safe base64 string') from e
