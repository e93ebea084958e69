"""
Write pipeline records with insert-or-skip semantics (idempotency)
"""

import enum
import uuid
from datetime import datetime
from typing import Any, List, Optional, Union
from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models import LastUpdate, License, Monument, Picture
from schemas.normalized import LicenseCreate, MonumentCreate, PictureCreate
from core.exceptions import FatalStorageError
import logging

logger = logging.getLogger(__name__)

Entity = Union[MonumentCreate, LicenseCreate, PictureCreate]

# Dialects whose INSERT supports ON CONFLICT
_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_ENTITY_TABLES = {
    MonumentCreate: Monument,
    LicenseCreate: License,
    PictureCreate: Picture,
}


class InsertOutcome(str, enum.Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"


class IdempotentWriter:
    """
    Persist monuments, licenses and pictures so that re-runs never duplicate.

    Ensures:
    - A natural-key collision is reported as ALREADY_EXISTS, not an error
    - Every other database failure raises FatalStorageError
    - One commit per entity, so a crash leaves only complete rows behind
    """

    def __init__(self, db_session: AsyncSession, dialect: Optional[str] = None):
        self.db = db_session
        self._dialect = dialect

    @property
    def dialect(self) -> str:
        if self._dialect is None:
            self._dialect = self.db.get_bind().dialect.name
        return self._dialect

    async def insert(self, entity: Entity) -> InsertOutcome:
        """
        Insert one entity (INSERT ... ON CONFLICT DO NOTHING).

        A fresh UUID is assigned when the entity has no id yet.

        Returns:
            INSERTED, or ALREADY_EXISTS when a row with the same natural key
            (or id) is already stored
        """
        table = _ENTITY_TABLES.get(type(entity))
        if table is None:
            raise TypeError(f"Cannot insert {type(entity).__name__}")

        values = entity.model_dump()
        if not values.get("id"):
            values["id"] = str(uuid.uuid4())

        if table is Monument and values.get("unique_number") is None:
            logger.warning(
                f"Monument {values.get('site')!r} has no unique_number; "
                f"it cannot be matched on re-run and will be stored again"
            )

        stmt = (
            self._insert_statement(table)
            .values(**values)
            .on_conflict_do_nothing()
            .returning(table.id)
        )

        try:
            result = await self.db.execute(stmt)
            row = result.first()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise FatalStorageError(
                f"Failed to insert into {table.__tablename__}",
                context={
                    "operation": "INSERT",
                    "table_name": table.__tablename__,
                    "record_id": values["id"]
                },
                original_exception=e
            )

        if row is None:
            logger.debug(f"{table.__tablename__}: {values['id']} already stored, skipped")
            return InsertOutcome.ALREADY_EXISTS

        logger.debug(f"{table.__tablename__}: {values['id']} inserted")
        return InsertOutcome.INSERTED

    async def update_monument(
        self,
        monument_id: str,
        site: Optional[str],
        long_description: Optional[str]
    ) -> bool:
        """
        Update the two mutable monument fields.

        Returns:
            True if the monument exists
        """
        stmt = (
            update(Monument)
            .where(Monument.id == monument_id)
            .values(
                site=site,
                long_description=long_description,
                updated_at=datetime.utcnow()
            )
        )
        result = await self._execute_and_commit(stmt, "UPDATE", Monument.__tablename__)
        return result.rowcount > 0

    async def list_monuments(self) -> List[Monument]:
        return await self._select_all(select(Monument).order_by(Monument.created_at, Monument.id), Monument)

    async def list_licenses(self) -> List[License]:
        return await self._select_all(select(License).order_by(License.flickr_id), License)

    async def last_update_for_monument(self, monument_id: str) -> Optional[datetime]:
        """Timestamp of the monument's last completed enrichment, if any"""
        try:
            result = await self.db.execute(
                select(LastUpdate.updated_at).where(LastUpdate.monument_id == monument_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise FatalStorageError(
                "Failed to read last update",
                context={
                    "operation": "SELECT",
                    "table_name": LastUpdate.__tablename__,
                    "monument_id": monument_id
                },
                original_exception=e
            )

    async def update_last_update(self, monument_id: str, timestamp: datetime):
        """Create or overwrite the monument's freshness timestamp"""
        stmt = self._insert_statement(LastUpdate).values(
            monument_id=monument_id,
            updated_at=timestamp
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["monument_id"],
            set_={"updated_at": stmt.excluded.updated_at}
        )
        await self._execute_and_commit(stmt, "UPSERT", LastUpdate.__tablename__)

    async def picture_exists(self, flickr_id: str) -> bool:
        """
        Point lookup by Flickr photo id.

        Lookup errors count as "not stored": the following insert is still
        protected by the unique index.
        """
        try:
            result = await self.db.execute(
                select(Picture.id).where(Picture.flickr_id == flickr_id).limit(1)
            )
            return result.first() is not None
        except SQLAlchemyError as e:
            logger.warning(f"Picture lookup failed for {flickr_id}, assuming absent: {e}")
            await self.db.rollback()
            return False

    def _insert_statement(self, table):
        insert = _DIALECT_INSERTS.get(self.dialect)
        if insert is None:
            raise FatalStorageError(
                "Database dialect does not support ON CONFLICT",
                context={"dialect": self.dialect}
            )
        return insert(table)

    async def _execute_and_commit(self, stmt, operation: str, table_name: str) -> Any:
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise FatalStorageError(
                f"Failed to {operation.lower()} {table_name}",
                context={"operation": operation, "table_name": table_name},
                original_exception=e
            )

    async def _select_all(self, stmt, table) -> List[Any]:
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise FatalStorageError(
                f"Failed to list {table.__tablename__}",
                context={"operation": "SELECT", "table_name": table.__tablename__},
                original_exception=e
            )
