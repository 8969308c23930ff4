"""Base repository: generic CRUD; every write runs inside a SAVEPOINT."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id, create, update and delete.

    Writes are wrapped in a nested transaction so a failed statement rolls back
    only that write and the session stays usable for the caller's next step.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and return it refreshed from the database."""
        async with self.db.begin_nested():
            self.db.add(obj)
            await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType, changes: dict[str, Any]) -> ModelType:
        """Apply attribute changes to an attached record and flush them."""
        async with self.db.begin_nested():
            for key, value in changes.items():
                setattr(obj, key, value)
            await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        async with self.db.begin_nested():
            await self.db.delete(obj)
            await self.db.flush()

    async def commit(self) -> None:
        """Commit the session's transaction now.

        Used before handing an id to work that reads it from another session
        (background triggers). Exiting get_db_transactional afterwards is a no-op.
        """
        await self.db.commit()
