"""Defines user and workflow concepts for the MARO accounts module."""

from typing import NamedTuple, Optional, List


class User(NamedTuple):
    """A registered or guest account."""

    user_id: str
    """Globally unique identifier (a UUID string)."""

    username: str
    """Email address, phone number, or (for guests) the user id itself."""

    email: Optional[str] = None
    phone_number: Optional[str] = None
    email_confirmed: bool = False
    phone_number_confirmed: bool = False

    roles: List[str] = []
    """Names of the roles to which the user belongs."""

    @property
    def is_guest(self) -> bool:
        """Guests are credential-less accounts in the ``guest`` role."""
        return 'guest' in self.roles


class IdentityError(NamedTuple):
    """A single reason reported by the credential store."""

    code: str
    description: str


class IdentityResult(NamedTuple):
    """Outcome of a mutating credential store operation."""

    succeeded: bool
    errors: List[IdentityError] = []

    @classmethod
    def success(cls) -> 'IdentityResult':
        """A result without errors."""
        return cls(succeeded=True, errors=[])

    @classmethod
    def failed(cls, *errors: IdentityError) -> 'IdentityResult':
        """A failed result carrying ``errors`` in the order reported."""
        return cls(succeeded=False, errors=list(errors))

    @property
    def first_error(self) -> Optional[str]:
        """Description of the first reported error, if any."""
        if self.errors:
            return self.errors[0].description
        return None


class RegisterResponse(NamedTuple):
    """Returned by email registration."""

    user_id: str
    return_url: Optional[str]


class ConfirmResponse(NamedTuple):
    """Returned by email and phone confirmation."""

    message: str
    return_url: Optional[str] = None


class ResetPasswordRequest(NamedTuple):
    """Input to password reset completion."""

    arg: str
    """Username: an email address or a phone number."""

    code: str
    """Either an encoded reset token or a six-character phone code."""

    password: str
    """The new password."""


class EmailMessage(NamedTuple):
    """A single email to be sent."""

    to: str
    subject: str
    body: str
    """HTML body."""


class SmsMessage(NamedTuple):
    """A single text message to be sent."""

    to: str
    body: str
