"""Refresh token registry: the server-side record that makes refresh tokens revocable."""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roster.core.errors import StorageError
from roster.models import RefreshToken
from roster.services.tokens import Clock, utc_now

logger = logging.getLogger(__name__)


class RefreshTokenRegistry:
    """
    Stores one row per issued refresh token.

    A refresh token is only honoured while its row exists and has not expired,
    so deleting the row revokes the token even though its signature stays valid.
    Every write commits before returning; storage failures roll back and raise
    StorageError.
    """

    def __init__(self, db: Session, clock: Clock = utc_now) -> None:
        self.db = db
        self.clock = clock

    def store(self, token: str, user_id: int, expires_at: datetime) -> None:
        try:
            self.db.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("refresh token insert failed", cause=e) from e

    def exists(self, token: str) -> bool:
        """True iff a non-expired row with exactly this token value is present."""
        try:
            row = (
                self.db.query(RefreshToken.id)
                .filter(
                    RefreshToken.token == token,
                    RefreshToken.expires_at > self.clock(),
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("refresh token lookup failed", cause=e) from e
        return row is not None

    def _delete(self, *criteria) -> int:
        try:
            deleted = (
                self.db.query(RefreshToken)
                .filter(*criteria)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("refresh token delete failed", cause=e) from e
        return deleted

    def revoke(self, token: str) -> None:
        """Delete the row for token. Revoking an unknown token is not an error."""
        if self._delete(RefreshToken.token == token):
            logger.info("Refresh token revoked")

    def revoke_all(self, user_id: int) -> int:
        """Delete every refresh token row for user_id; returns how many were removed."""
        deleted = self._delete(RefreshToken.user_id == user_id)
        logger.info("Revoked %s refresh token(s) for user_id=%s", deleted, user_id)
        return deleted

    def purge_expired(self) -> int:
        """Delete rows whose expiry has passed. Idempotent: safe to run repeatedly."""
        cutoff = self.clock()
        deleted = self._delete(RefreshToken.expires_at <= cutoff)
        if deleted > 0:
            logger.info(
                "Refresh token sweep: cutoff=%s, deleted=%s",
                cutoff.isoformat(),
                deleted,
            )
        return deleted
