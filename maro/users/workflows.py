"""
Registration, confirmation and password recovery workflows.

Users can sign up with an email address or a phone number, or be issued an
anonymous guest account. Email flows send a link carrying an encoded store
token; phone flows send a six-digit code that is kept on the user record until
it is used.

Each operation runs to completion in order: look the user up, check state,
mutate through the credential store, then notify. Failures are raised to the
caller straight away as one of the :mod:`.exceptions`; nothing is retried or
rolled back, so e.g. a missing role after a successful create leaves a user
without a role.
"""

import logging
from functools import wraps
from html import escape
from typing import List, Optional, Type

from . import domain, encoding
from .context import get_application_global
from .domain import IdentityResult
from .exceptions import AuthError, NotFound, RoleNotFound, \
    DuplicateIdentity, InvalidRequest, RegistrationFailed, \
    ConfirmationFailed, ResetFailed
from .identity import accounts, roles, tokens
from .identity.models import DBRole, DBUser, new_id
from .notifications import EmailSender, SmsSender, current_email_sender, \
    current_sms_sender

logger = logging.getLogger(__name__)

EMAIL_CONFIRMED = 'Email подтверждён'
PHONE_CONFIRMED = 'Номер телефона подтверждён'
UNKNOWN_OR_UNCONFIRMED = 'Пользователь не найден или аккаунт не подтверждён'
INVALID_CODE = 'Неверный код подтверждения'


def _raise_for(result: IdentityResult, error: Type[AuthError],
               default: str) -> None:
    """Raise ``error`` with the first reported reason if ``result`` failed."""
    if not result.succeeded:
        raise error(result.first_error or default)


def _link(url: str, text: str = 'этой ссылке') -> str:
    return f"<a href='{escape(url)}'>{text}</a>"


class AuthWorkflow(object):
    """
    Orchestrates the credential store and the notification senders.

    Instances hold only their senders, and must be used inside a Flask
    application context bound to the accounts database.
    """

    def __init__(self, email_sender: EmailSender,
                 sms_sender: SmsSender) -> None:
        self._email = email_sender
        self._sms = sms_sender

    def _get_role(self, name: str) -> DBRole:
        role = roles.find_by_name(name)
        if role is None:
            raise RoleNotFound(name)
        return role

    def _assign_role(self, user: DBUser, name: str,
                     error: Type[AuthError], default: str) -> None:
        role = self._get_role(name)
        _raise_for(accounts.add_to_role(user, role.name), error, default)

    def email_register(self, arg: str, password: str, url_raw: str,
                       return_url: Optional[str]) -> domain.RegisterResponse:
        """
        Register a user by email address and send a confirmation link.

        Parameters
        ----------
        arg : str
            Email address; also used as the username.
        password : str
        url_raw : str
            Base URL of the confirmation page.
        return_url : str
            Where to send the user after confirmation.

        Returns
        -------
        :class:`.domain.RegisterResponse`

        Raises
        ------
        :class:`.DuplicateIdentity`
            If the email address is taken.
        :class:`.RegistrationFailed`
            If the store rejects the user, e.g. for a weak password.
        :class:`.RoleNotFound`
            If the ``user`` role has not been provisioned.

        """
        default = 'Ошибка регистрации по Email'
        if accounts.find_by_email(arg) is not None:
            raise DuplicateIdentity('Пользователь с таким Email уже существует')

        user = DBUser(username=arg, email=arg)
        _raise_for(accounts.create(user, password), RegistrationFailed,
                   default)
        logger.info('UserID: %s. Пользователь создал новую учетную запись '
                    'с паролем', user.user_id)

        self._assign_role(user, DBRole.USER, RegistrationFailed, default)

        code = encoding.encode(
            accounts.generate_email_confirmation_token(user)
        )
        callback_url = f'{url_raw}/confirm?userId={user.user_id}' \
                       f'&code={code}&returnUrl={return_url}'
        self._email.send(domain.EmailMessage(
            to=arg,
            subject='Подтвердите Вашу почту',
            body=f'Для подтверждения аккаунта перейдите по '
                 f'{_link(callback_url)}.'
        ))
        return domain.RegisterResponse(user_id=user.user_id,
                                       return_url=return_url)

    def email_confirm(self, user_id: str, code: str,
                      return_url: Optional[str] = None) \
            -> domain.ConfirmResponse:
        """Confirm an email address with the encoded token from the link."""
        user = accounts.find_by_id(user_id)
        if user is None:
            raise NotFound('User', user_id)

        try:
            token = encoding.decode(code)
        except ValueError:
            logger.debug('UserID: %s. Undecodable confirmation code', user_id)
            result = IdentityResult.failed(accounts.INVALID_TOKEN)
        else:
            result = accounts.confirm_email(user, token)

        _raise_for(result, ConfirmationFailed, 'Ошибка подтверждения Email')
        return domain.ConfirmResponse(message=EMAIL_CONFIRMED,
                                      return_url=return_url)

    def email_forgot_password(self, email: str, url_raw: str) -> None:
        """
        Send a password reset link to ``email``.

        Unlike :meth:`phone_forgot_password`, this does not require the
        address to be confirmed.
        """
        user = accounts.find_by_email(email)
        if user is None:
            raise InvalidRequest(UNKNOWN_OR_UNCONFIRMED)

        code = encoding.encode(accounts.generate_password_reset_token(user))
        callback_url = f'{url_raw}/reset-password?email={email}&code={code}'
        self._email.send(domain.EmailMessage(
            to=user.email,
            subject='Сброс пароля',
            body=f'Для сброса пароля перейдите по {_link(callback_url)}.'
        ))

    def login_as_guest(self) -> str:
        """Issue a credential-less guest account and return its id."""
        default = 'Ошибка выдачи id гостю'
        user_id = new_id()
        user = DBUser(user_id=user_id, username=user_id)
        _raise_for(accounts.create(user), RegistrationFailed, default)
        self._assign_role(user, DBRole.GUEST, RegistrationFailed, default)
        logger.debug('UserID: %s. Issued guest account', user_id)
        return user.user_id

    def phone_confirm(self, user_id: str, code: str,
                      return_url: Optional[str] = None) \
            -> domain.ConfirmResponse:
        """Confirm a phone number with the code sent by text message."""
        user = accounts.find_by_id(user_id)
        if user is None:
            raise NotFound('User', user_id)

        pending = user.phone_confirmation_code
        if pending is None or pending != code:
            raise ConfirmationFailed('Ошибка подтверждения номера телефона')

        user.phone_confirmation_code = None
        user.phone_number_confirmed = True
        _raise_for(accounts.update(user), ConfirmationFailed,
                   'Ошибка подтверждения номера телефона')
        return domain.ConfirmResponse(message=PHONE_CONFIRMED,
                                      return_url=return_url)

    def phone_forgot_password(self, phone_number: str) -> None:
        """Text a reset code to a confirmed phone number."""
        user = accounts.find_by_phone_number(phone_number)
        if user is None or not accounts.is_phone_number_confirmed(user):
            raise InvalidRequest(UNKNOWN_OR_UNCONFIRMED)

        code = accounts.generate_change_phone_number_token(user, phone_number)
        user.phone_confirmation_code = code
        _raise_for(accounts.update(user), ResetFailed, 'Ошибка сброса пароля')

        self._sms.send(domain.SmsMessage(
            to=phone_number,
            body=f'Ваш код для сброса: {code}'
        ))

    def phone_register(self, arg: str, password: str,
                       return_url: Optional[str]) -> List[Optional[str]]:
        """
        Register a user by phone number and text a confirmation code.

        The creation result is checked before the role is looked up, so a
        rejected registration never touches roles.

        Returns
        -------
        list
            ``[user_id, return_url]``.

        """
        default = 'Ошибка регистрации по номеру телефона'
        if accounts.find_by_name(arg) is not None:
            raise DuplicateIdentity(
                'Пользователь с таким номером телефона уже зарегистрирован'
            )

        user = DBUser(user_id=new_id(), username=arg, phone_number=arg)
        _raise_for(accounts.create(user, password), RegistrationFailed,
                   default)
        logger.info('UserID: %s. Пользователь создал новую учетную запись '
                    'с паролем', user.user_id)

        self._assign_role(user, DBRole.USER, RegistrationFailed, default)

        code = accounts.generate_change_phone_number_token(user,
                                                           user.phone_number)
        user.phone_confirmation_code = code
        _raise_for(accounts.update(user), RegistrationFailed, default)

        self._sms.send(domain.SmsMessage(to=arg, body=f'Ваш код: {code}'))
        return [user.user_id, return_url]

    def reset_password(self, model: domain.ResetPasswordRequest) -> None:
        """
        Set a new password using an email token or a phone code.

        A code of exactly six characters is treated as a phone code. Such a
        reset always goes through, whether or not the code matches the one on
        record; the mismatch is only logged. Any other code is decoded and
        checked by the store as a reset token.
        """
        user = accounts.find_by_name(model.arg)
        if user is None:
            raise NotFound('User', model.arg)

        if len(model.code) != tokens.PHONE_CODE_LENGTH:
            try:
                token = encoding.decode(model.code)
            except ValueError:
                result = IdentityResult.failed(accounts.INVALID_TOKEN)
            else:
                result = accounts.reset_password(user, token, model.password)
        else:
            if model.code != user.phone_confirmation_code:
                logger.warning('UserID: %s. %s', user.user_id, INVALID_CODE)
            user.phone_confirmation_code = None
            accounts.force_password(user, model.password)
            result = accounts.update(user)

        _raise_for(result, ResetFailed, 'Ошибка сброса пароля')


def get_workflow() -> AuthWorkflow:
    """Build a workflow with the senders configured for this context."""
    return AuthWorkflow(current_email_sender(), current_sms_sender())


def current_workflow() -> AuthWorkflow:
    """Get/create :class:`.AuthWorkflow` for this context."""
    g = get_application_global()
    if g is None:
        return get_workflow()
    if 'auth_workflow' not in g:
        g.auth_workflow = get_workflow()
    return g.auth_workflow      # type: ignore


@wraps(AuthWorkflow.email_register)
def email_register(arg: str, password: str, url_raw: str,
                   return_url: Optional[str]) -> domain.RegisterResponse:
    """Register a user by email address."""
    return current_workflow().email_register(arg, password, url_raw,
                                             return_url)


@wraps(AuthWorkflow.email_confirm)
def email_confirm(user_id: str, code: str,
                  return_url: Optional[str] = None) -> domain.ConfirmResponse:
    """Confirm an email address."""
    return current_workflow().email_confirm(user_id, code, return_url)


@wraps(AuthWorkflow.email_forgot_password)
def email_forgot_password(email: str, url_raw: str) -> None:
    """Send a password reset link."""
    return current_workflow().email_forgot_password(email, url_raw)


@wraps(AuthWorkflow.login_as_guest)
def login_as_guest() -> str:
    """Issue a guest account."""
    return current_workflow().login_as_guest()


@wraps(AuthWorkflow.phone_confirm)
def phone_confirm(user_id: str, code: str,
                  return_url: Optional[str] = None) -> domain.ConfirmResponse:
    """Confirm a phone number."""
    return current_workflow().phone_confirm(user_id, code, return_url)


@wraps(AuthWorkflow.phone_forgot_password)
def phone_forgot_password(phone_number: str) -> None:
    """Text a password reset code."""
    return current_workflow().phone_forgot_password(phone_number)


@wraps(AuthWorkflow.phone_register)
def phone_register(arg: str, password: str,
                   return_url: Optional[str]) -> List[Optional[str]]:
    """Register a user by phone number."""
    return current_workflow().phone_register(arg, password, return_url)


@wraps(AuthWorkflow.reset_password)
def reset_password(model: domain.ResetPasswordRequest) -> None:
    """Set a new password."""
    return current_workflow().reset_password(model)
