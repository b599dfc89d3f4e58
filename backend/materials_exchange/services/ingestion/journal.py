"""
Replace journal

Records "deleted N, about to insert M" before the insert phase of a
non-transactional bulk replace, so that an interrupted replace can be
detected by the next attempt.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from materials_exchange.core.exceptions import StoreError
from materials_exchange.models.inventory import ReplaceLog

logger = logging.getLogger(__name__)


class ReplaceJournal:
    """Two-phase log entries for one database"""

    def __init__(self, db: Session):
        self.db = db

    def begin(self, tenant_key: str, deleted_count: int, expected_count: int) -> ReplaceLog:
        entry = ReplaceLog(
            tenant_key=tenant_key,
            phase="inserting",
            deleted_count=deleted_count,
            expected_count=expected_count,
            inserted_count=0,
        )
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
        logger.info(
            f"Replace for {tenant_key}: deleted {deleted_count}, about to insert {expected_count}"
        )
        return entry

    def progress(self, entry: ReplaceLog, inserted_count: int):
        entry.inserted_count = inserted_count
        self._commit(entry)

    def complete(self, entry: ReplaceLog):
        entry.phase = "completed"
        entry.finished_at = datetime.now()
        self._commit(entry)
        self.resolve(entry.tenant_key)

    def fail(self, entry: ReplaceLog, message: str, inserted_count: int):
        entry.phase = "failed"
        entry.inserted_count = inserted_count
        entry.error_message = message
        entry.finished_at = datetime.now()
        self._commit(entry)

    def resolve(self, tenant_key: str) -> int:
        """Mark unfinished entries of ``tenant_key`` as superseded"""
        try:
            result = self.db.execute(
                update(ReplaceLog)
                .where(ReplaceLog.tenant_key == tenant_key)
                .where(ReplaceLog.phase.in_(("inserting", "failed")))
                .values(phase="superseded")
            )
            self.db.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Could not resolve replace log for {tenant_key}: {e}")
            return 0

    def pending(self, tenant_key: str) -> Optional[ReplaceLog]:
        """Latest unfinished replace for ``tenant_key``"""
        return self.db.execute(
            select(ReplaceLog)
            .where(ReplaceLog.tenant_key == tenant_key)
            .where(ReplaceLog.phase.in_(("inserting", "failed")))
            .order_by(ReplaceLog.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def _commit(self, entry: ReplaceLog):
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            # The journal must not mask the store error being reported
            self.db.rollback()
            logger.error(f"Could not update replace log for {entry.tenant_key}: {e}")
