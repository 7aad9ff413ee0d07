"""Flask configuration."""
import secrets
import os

#################### Database ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite:///maro-users.db')
"""Connection string for the accounts database."""

SQLALCHEMY_TRACK_MODIFICATIONS = False

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""Create tables and provision roles when the application starts."""


#################### Tokens ####################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key. Not directly used by the workflows."""

TOKEN_SECRET = os.environ.get('TOKEN_SECRET', SECRET_KEY)
"""Secret used to sign email confirmation and password reset JWTs."""

TOKEN_LIFESPAN = int(os.environ.get('TOKEN_LIFESPAN', '86400'))
"""Seconds for which an email confirmation or reset token remains valid."""

PHONE_CODE_TIMESTEP = int(os.environ.get('PHONE_CODE_TIMESTEP', '180'))
"""Length in seconds of the time step used to derive phone codes."""

PHONE_CODE_VARIANCE = int(os.environ.get('PHONE_CODE_VARIANCE', '2'))
"""Number of time steps on either side of now for which a code verifies."""


#################### Password policy ####################
PASSWORD_REQUIRED_LENGTH = int(os.environ.get('PASSWORD_REQUIRED_LENGTH', '6'))
PASSWORD_REQUIRE_DIGIT = bool(int(os.environ.get('PASSWORD_REQUIRE_DIGIT', 1)))
PASSWORD_REQUIRE_LOWERCASE = bool(int(os.environ.get(
    'PASSWORD_REQUIRE_LOWERCASE', 1
)))
PASSWORD_REQUIRE_UPPERCASE = bool(int(os.environ.get(
    'PASSWORD_REQUIRE_UPPERCASE', 1
)))
PASSWORD_REQUIRE_NON_ALPHANUMERIC = bool(int(os.environ.get(
    'PASSWORD_REQUIRE_NON_ALPHANUMERIC', 0
)))


#################### Lockout ####################
LOCKOUT_MAX_FAILED_ACCESS_ATTEMPTS = int(os.environ.get(
    'LOCKOUT_MAX_FAILED_ACCESS_ATTEMPTS',
    '5'
))
LOCKOUT_DURATION = int(os.environ.get('LOCKOUT_DURATION', '300'))
"""Seconds for which an account stays locked after too many failures."""


#################### Notifications ####################
EMAIL_BACKEND = os.environ.get('EMAIL_BACKEND', 'log')
"""Either ``smtp`` or ``log``. The ``log`` backend only writes to the log."""

SMTP_HOST = os.environ.get('SMTP_HOST', 'localhost')
SMTP_PORT = int(os.environ.get('SMTP_PORT', '25'))
SMTP_USERNAME = os.environ.get('SMTP_USERNAME')
SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD')
SMTP_SENDER = os.environ.get('SMTP_SENDER', 'no-reply@localhost')
SMTP_USE_TLS = bool(int(os.environ.get('SMTP_USE_TLS', 0)))

SMS_BACKEND = os.environ.get('SMS_BACKEND', 'log')
"""Either ``gateway`` or ``log``."""

SMS_GATEWAY_URL = os.environ.get('SMS_GATEWAY_URL')
"""Endpoint that accepts a JSON POST with ``to``, ``from`` and ``message``."""

SMS_GATEWAY_TOKEN = os.environ.get('SMS_GATEWAY_TOKEN')
SMS_SENDER_ID = os.environ.get('SMS_SENDER_ID', 'MARO')
SMS_TIMEOUT = int(os.environ.get('SMS_TIMEOUT', '10'))


#################### Minor configs ##############################
LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
"""Root log level installed by :func:`maro.users.app_logging.setup_logger`."""
