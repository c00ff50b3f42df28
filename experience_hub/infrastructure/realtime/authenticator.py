"""Resolve socket handshake credentials into connection identities."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType

from sqlalchemy.orm import Session

from experience_hub.domain.entities import Identity
from experience_hub.infrastructure.database import run_in_session_async
from experience_hub.infrastructure.repositories import UserRepository
from experience_hub.infrastructure.security import subject_from_token

logger = logging.getLogger(__name__)


def extract_token(
    query_params: Mapping[str, str], headers: Mapping[str, str]
) -> str | None:
    """Return the bearer credential carried by a handshake, if any.

    The ``token`` query parameter plays the role of the handshake auth payload
    and wins over an ``Authorization: Bearer`` header.
    """

    token = (query_params.get("token") or "").strip()
    if token:
        return token
    authorization = (headers.get("authorization") or "").strip()
    scheme, _, credential = authorization.partition(" ")
    if scheme.lower() == "bearer" and credential.strip():
        return credential.strip()
    return None


class ConnectionAuthenticator:
    """Attach identities to connections without ever rejecting a handshake.

    Identities live in a side-table keyed by connection id; the socket object
    itself is never mutated.
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory
        self._identities: dict[str, Identity] = {}

    async def authenticate(self, connection_id: str, token: str | None) -> Identity | None:
        """Resolve ``token`` for ``connection_id``; failures degrade to anonymous."""

        if not token:
            logger.warning("WebSocket connection %s without token", connection_id)
            return None

        try:
            identity = await run_in_session_async(
                lambda session: self._resolve(session, token), self._session_factory
            )
        except Exception:
            logger.exception("WebSocket authentication failed for %s", connection_id)
            return None

        if identity is None:
            logger.warning("WebSocket token for %s did not match an active user", connection_id)
            return None

        self._identities[connection_id] = identity
        logger.info(
            "WebSocket %s authenticated as user %s (%s)",
            connection_id,
            identity.user_id,
            identity.role.value,
        )
        return identity

    def identity_for(self, connection_id: str) -> Identity | None:
        return self._identities.get(connection_id)

    def forget(self, connection_id: str) -> None:
        self._identities.pop(connection_id, None)

    @property
    def identities(self) -> Mapping[str, Identity]:
        """Read-only view of the connection id to identity table."""

        return MappingProxyType(self._identities)

    @staticmethod
    def _resolve(session: Session, token: str) -> Identity | None:
        try:
            user_id = subject_from_token(token)
        except ValueError:
            logger.info("Rejected socket credential: invalid token")
            return None

        repository = UserRepository(session)
        user = repository.get(user_id)
        if user is None or not user.is_active:
            return None
        identity = Identity.from_user(user)

        # The credential is already verified; a failed stamp keeps the identity.
        try:
            repository.touch_last_login(user_id)
        except Exception:
            session.rollback()
            logger.exception("Could not record last login for user %s", user_id)
        return identity


connection_authenticator = ConnectionAuthenticator()


__all__ = ["ConnectionAuthenticator", "connection_authenticator", "extract_token"]
