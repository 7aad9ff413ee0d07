"""Look up and provision roles."""

import logging
from typing import Optional

from . import util
from .models import DBRole

logger = logging.getLogger(__name__)


def find_by_name(name: str) -> Optional[DBRole]:
    """Get a role by (case-insensitive) name, or ``None``."""
    with util.transaction() as session:
        return (
            session.query(DBRole)
            .filter(DBRole.normalized_name == name.upper())
            .first()
        )


def insert_roles() -> None:
    """Provision the roles that the workflows expect, if they are missing."""
    with util.transaction() as session:
        for name in DBRole.ROLES:
            exists = (
                session.query(DBRole)
                .filter(DBRole.normalized_name == name.upper())
                .first()
            )
            if exists:
                continue
            logger.info('Provisioning role %s', name)
            session.add(DBRole(name=name, normalized_name=name.upper()))
