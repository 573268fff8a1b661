"""
Firebase identity resolver.

Verifies Firebase ID tokens with the Admin SDK.
"""
import asyncio
import base64
import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials

from core.application.interfaces import IIdentityResolver
from core.domain.errors import Unauthenticated
from core.settings.sections import FirebaseSettings


logger = logging.getLogger(__name__)


def _load_service_account(service_key: str) -> dict:
    """Decode the base64-encoded service-account JSON."""
    decoded = base64.b64decode(service_key).decode("utf-8")
    return json.loads(decoded)


class FirebaseIdentityResolver(IIdentityResolver):
    """
    Resolve caller email from a Firebase ID token.

    The Admin SDK app is initialized once per process.
    """

    def __init__(self, settings: FirebaseSettings, app: Optional[firebase_admin.App] = None):
        if app is None:
            if not settings.service_key:
                raise ValueError("FIREBASE_SERVICE_KEY is required when Firebase is enabled")
            try:
                app = firebase_admin.get_app()
            except ValueError:
                app = firebase_admin.initialize_app(
                    credentials.Certificate(_load_service_account(settings.service_key))
                )
                logger.info("Initialized Firebase Admin app")
        self._app = app

    async def resolve(self, credential: str) -> str:
        if not credential:
            raise Unauthenticated()

        try:
            # verify_id_token does blocking I/O (public key fetch)
            decoded = await asyncio.to_thread(auth.verify_id_token, credential, app=self._app)
        except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError,
                auth.CertificateFetchError, ValueError) as e:
            logger.warning(f"ID token rejected: {e.__class__.__name__}")
            raise Unauthenticated() from e

        email = decoded.get("email")
        if not email:
            raise Unauthenticated("Token carries no email claim")
        return email
