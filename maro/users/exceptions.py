"""Exceptions raised by the authentication workflows."""

from typing import Any


class AuthError(RuntimeError):
    """Base class for failures reported to the caller of a workflow."""


class NotFound(AuthError):
    """An entity lookup by id, name or email came up empty."""

    def __init__(self, name: str, key: Any) -> None:
        self.name = name
        self.key = key
        super(NotFound, self).__init__(f'Сущность "{name}" ({key}) не найдена.')


class RoleNotFound(NotFound):
    """A pre-provisioned role is missing from the database."""

    def __init__(self, role_name: str) -> None:
        super(RoleNotFound, self).__init__('Role', role_name)


class DuplicateIdentity(AuthError):
    """A user with the same email or username already exists."""


class InvalidRequest(AuthError):
    """The request refers to a missing or unconfirmed account."""


class RegistrationFailed(AuthError):
    """The credential store refused to create the account."""


class ConfirmationFailed(AuthError):
    """Email or phone confirmation did not succeed."""


class ResetFailed(AuthError):
    """Password reset did not succeed."""


class NotificationFailed(RuntimeError):
    """An email or text message could not be handed to its transport."""
