"""
JWT bearer authentication classes.

Kept apart from the views so that DRF can import the authentication
classes named in settings without pulling in view modules (and their
model imports) during start-up.
"""
from __future__ import annotations

import logging

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = logging.getLogger(__name__)


class BearerAuthentication(JWTAuthentication):
    """Simple JWT authentication reading ``Authorization: Bearer <token>``.

    This subclass gives the project a stable import path for settings
    and for the per-view ``authentication_classes`` overrides.
    """


class OptionalBearerAuthentication(BearerAuthentication):
    """Bearer authentication that never rejects a request.

    Used on public endpoints that personalise their output (favorites)
    when a valid token is present.  Missing, malformed or expired tokens
    leave the request anonymous.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except exceptions.AuthenticationFailed as exc:
            logger.debug('Ignoring invalid bearer token on optional endpoint: %s', exc)
            return None
