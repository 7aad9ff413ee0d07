"""
MARO user accounts: registration and authentication workflows.

Users sign up either with an email address or with a phone number. Email
sign-ups receive a confirmation link; phone sign-ups receive a six-digit code
by text message. Either kind of user can later recover their password through
the same channel. Visitors who do not want an account can be issued an
anonymous guest account instead.

Quick start
-----------

.. code-block:: python

   from maro.users import workflows
   from maro.users.factory import create_app

   app = create_app()
   with app.app_context():
       response = workflows.email_register(
           'a@example.com', 'Secret123!', 'https://maro.example', '/'
       )

The database must have been set up with ``maro-users create-db``, which also
provisions the ``user`` and ``guest`` roles. Outbound messages go to the log
unless ``EMAIL_BACKEND`` / ``SMS_BACKEND`` are configured (see
:mod:`maro.users.config`).
"""

from .domain import User, RegisterResponse, ConfirmResponse, \
    ResetPasswordRequest, EmailMessage, SmsMessage
from .workflows import AuthWorkflow
