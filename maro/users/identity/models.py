"""Accounts database models."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, \
    String
from sqlalchemy.orm import relationship
from flask_sqlalchemy import SQLAlchemy

from .. import domain

db: SQLAlchemy = SQLAlchemy()


def new_id() -> str:
    """Generate a random identifier for users, roles and stamps."""
    return str(uuid.uuid4())


user_roles = db.Table(
    'maro_user_roles',
    Column('user_id', ForeignKey('maro_users.user_id'), primary_key=True),
    Column('role_id', ForeignKey('maro_roles.role_id'), primary_key=True)
)


class DBRole(db.Model):  # type: ignore
    """
    Named permission group.

    Roles are provisioned by :func:`.roles.insert_roles`; the workflows only
    ever look them up.
    """

    __tablename__ = 'maro_roles'

    USER = 'user'
    GUEST = 'guest'
    ROLES = [USER, GUEST]

    role_id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(256), nullable=False, unique=True)
    normalized_name = Column(String(256), nullable=False, unique=True,
                             index=True)


class DBUser(db.Model):  # type: ignore
    """
    User account, including guests.

    +-------------------------+--------------+------+-----+---------+
    | Field                   | Type         | Null | Key | Default |
    +-------------------------+--------------+------+-----+---------+
    | user_id                 | varchar(36)  | NO   | PRI | NULL    |
    | username                | varchar(256) | NO   |     | NULL    |
    | normalized_username     | varchar(256) | NO   | UNI | NULL    |
    | email                   | varchar(256) | YES  |     | NULL    |
    | normalized_email        | varchar(256) | YES  | MUL | NULL    |
    | email_confirmed         | tinyint(1)   | NO   |     | 0       |
    | phone_number            | varchar(64)  | YES  | MUL | NULL    |
    | phone_number_confirmed  | tinyint(1)   | NO   |     | 0       |
    | phone_confirmation_code | varchar(32)  | YES  |     | NULL    |
    | password_hash           | varchar(255) | YES  |     | NULL    |
    | security_stamp          | varchar(36)  | NO   |     | NULL    |
    | concurrency_stamp       | varchar(36)  | NO   |     | NULL    |
    | lockout_enabled         | tinyint(1)   | NO   |     | 1       |
    | lockout_end             | datetime     | YES  |     | NULL    |
    | access_failed_count     | int(11)      | NO   |     | 0       |
    +-------------------------+--------------+------+-----+---------+
    """

    __tablename__ = 'maro_users'

    user_id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(256), nullable=False)
    normalized_username = Column(String(256), nullable=False, unique=True,
                                 index=True)
    email = Column(String(256), nullable=True)
    normalized_email = Column(String(256), nullable=True, index=True)
    email_confirmed = Column(Boolean, nullable=False, default=False)
    phone_number = Column(String(64), nullable=True, index=True)
    phone_number_confirmed = Column(Boolean, nullable=False, default=False)
    phone_confirmation_code = Column(String(32), nullable=True)
    """Outstanding phone confirmation or reset code, if any."""

    password_hash = Column(String(255), nullable=True)
    """Null for guests."""

    security_stamp = Column(String(36), nullable=False, default=new_id)
    """Rotated whenever credentials change; embedded in issued tokens."""

    concurrency_stamp = Column(String(36), nullable=False)
    """Optimistic concurrency token, replaced on every update."""

    lockout_enabled = Column(Boolean, nullable=False, default=True)
    lockout_end = Column(DateTime(timezone=True), nullable=True)
    access_failed_count = Column(Integer, nullable=False, default=0)

    roles = relationship('DBRole', secondary=user_roles)

    __mapper_args__ = {
        'version_id_col': concurrency_stamp,
        'version_id_generator': lambda version: new_id()
    }

    def to_domain(self) -> domain.User:
        """Generate a :class:`.domain.User` from this row."""
        return domain.User(
            user_id=self.user_id,
            username=self.username,
            email=self.email,
            phone_number=self.phone_number,
            email_confirmed=bool(self.email_confirmed),
            phone_number_confirmed=bool(self.phone_number_confirmed),
            roles=[role.name for role in self.roles]
        )
