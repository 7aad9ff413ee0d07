"""Application factory for the accounts module."""

from flask import Flask

from .identity import util


def create_app() -> Flask:
    """Initialize and configure an application bound to the accounts DB."""
    app = Flask('maro.users')
    app.config.from_pyfile('config.py')

    util.init_app(app)

    if app.config['CREATE_DB']:
        with app.app_context():
            util.create_all()

    return app
