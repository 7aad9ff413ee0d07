"""
The credential store: user and role persistence, passwords and tokens.

Workflows in :mod:`maro.users.workflows` talk to the database only through
this package. Account rows are :class:`.models.DBUser` instances bound to the
Flask-SQLAlchemy session of the current application context; callers mutate
them and hand them back to :func:`.accounts.update`.
"""

from . import accounts, exceptions, models, passwords, roles, tokens, util
from .util import create_all, init_app, current_session, drop_all, \
    is_available
