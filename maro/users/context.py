"""Application context helpers."""

import os
from typing import Any, Mapping, Optional

from flask import Flask, current_app, g, has_app_context


def get_application_config(app: Optional[Flask] = None) -> Mapping[str, Any]:
    """
    Get the configuration for the current application.

    Falls back to the process environment when called outside of a Flask
    application context, so values may be strings.
    """
    if app is not None:
        return app.config
    if has_app_context():
        return current_app.config
    return os.environ


def get_application_global() -> Optional[Any]:
    """Get the application-context global, if there is one."""
    if has_app_context():
        return g
    return None


def as_bool(value: Any) -> bool:
    """Interpret a config value that may have come from the environment."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)
