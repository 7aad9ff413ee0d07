"""Exceptions."""


class PasswordAuthenticationFailed(RuntimeError):
    """Password is not correct."""


class InvalidToken(ValueError):
    """Token is malformed, tampered with, or issued for something else."""


class ExpiredToken(InvalidToken):
    """Token was valid once, but its lifespan is over."""
