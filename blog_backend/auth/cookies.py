"""Session cookie attributes.

Production serves the frontend from another origin, so the cookie must be
``SameSite=None; Secure`` for browsers to send it cross-site. Locally the
browser defaults are enough.
"""
from fastapi import Response

from blog_backend.core import config


def cookie_attributes(environment: str | None = None) -> dict:
    attributes = {
        "httponly": True,
        "max_age": config.SESSION_COOKIE_MAX_AGE_SECONDS,
    }
    if config.is_production(environment):
        attributes["samesite"] = "none"
        attributes["secure"] = True
    return attributes


def set_session_cookie(response: Response, token: str, environment: str | None = None) -> Response:
    attributes = cookie_attributes(environment)
    response.set_cookie(
        key=config.ACCESS_TOKEN_COOKIE_NAME,
        value=token,
        max_age=attributes["max_age"],
        httponly=attributes["httponly"],
        samesite=attributes.get("samesite"),
        secure=attributes.get("secure", False),
    )
    return response


def clear_session_cookie(response: Response, environment: str | None = None) -> Response:
    attributes = cookie_attributes(environment)
    response.delete_cookie(
        key=config.ACCESS_TOKEN_COOKIE_NAME,
        httponly=attributes["httponly"],
        samesite=attributes.get("samesite"),
        secure=attributes.get("secure", False),
    )
    return response
