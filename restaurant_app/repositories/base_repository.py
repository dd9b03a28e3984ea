"""
Base repository with generic CRUD operations for MongoDB.
All entity repositories inherit from this.

Entities are Pydantic models keyed by an integer id stored as `_id`.
Every method takes an optional `session` so callers can run several
operations in one unit of work.
"""
from typing import Optional, List, Dict, Any, Generic, Iterable, Type, TypeVar
from datetime import datetime, timezone
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel
from pymongo import ASCENDING, ReturnDocument

from restaurant_app.utils.logger import log_database_operation

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Generic repository for MongoDB CRUD operations.

    Provides: find_by_id, find_by_ids, find_all, exists, insert, update, delete.
    """

    model: Type[T]

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        counters: AsyncIOMotorCollection
    ):
        """
        Initialize repository.

        Args:
            collection: Collection holding the entity documents
            counters: Collection holding one id sequence per entity collection
        """
        self.collection = collection
        self.counters = counters

    def to_document(self, entity: T) -> Dict[str, Any]:
        """Mutable fields of an entity, without its id."""
        return entity.model_dump(exclude={"id"})

    def to_entity(self, document: Dict[str, Any]) -> T:
        data = dict(document)
        data["id"] = data.pop("_id")
        return self.model.model_validate(data)

    async def next_id(self) -> int:
        """
        Allocate the next id of this collection.

        The counter document is created on first use, so ids start at 1.
        The increment runs outside any session and commits immediately:
        concurrent units of work never write the counter inside their
        transactions, and an id taken by an aborted unit of work is skipped.
        """
        counter = await self.counters.find_one_and_update(
            {"_id": self.collection.name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
            session=None
        )
        return int(counter["seq"])

    async def find_by_id(self, entity_id: int, session=None) -> Optional[T]:
        """
        Find entity by ID.

        Args:
            entity_id: Entity ID
            session: Optional client session

        Returns:
            Entity or None if not found
        """
        document = await self.collection.find_one({"_id": entity_id}, session=session)
        log_database_operation(logger, "find", self.collection.name, entity_id)

        if document is None:
            return None

        return self.to_entity(document)

    async def find_by_ids(self, entity_ids: Iterable[int], session=None) -> List[T]:
        """Find every entity whose id is listed, ordered by id."""
        ids = list(entity_ids)
        if not ids:
            return []

        cursor = self.collection.find(
            {"_id": {"$in": ids}},
            session=session
        ).sort("_id", ASCENDING)
        documents = await cursor.to_list(length=None)

        return [self.to_entity(doc) for doc in documents]

    async def find_all(self, session=None) -> List[T]:
        """
        Find all entities.

        Returns:
            Entities ordered by id
        """
        cursor = self.collection.find({}, session=session).sort("_id", ASCENDING)
        documents = await cursor.to_list(length=None)
        log_database_operation(logger, "find_all", self.collection.name)

        return [self.to_entity(doc) for doc in documents]

    async def exists(self, entity_id: int, session=None) -> bool:
        count = await self.collection.count_documents(
            {"_id": entity_id},
            limit=1,
            session=session
        )
        return count > 0

    async def insert(self, entity: T, session=None) -> T:
        """
        Insert a new entity. Any id on the entity is ignored.

        Args:
            entity: Entity to persist
            session: Optional client session

        Returns:
            The persisted entity with its assigned id
        """
        document = self.to_document(entity)
        document["_id"] = await self.next_id()

        now = datetime.now(timezone.utc)
        document["created_at"] = now
        document["updated_at"] = now

        await self.collection.insert_one(document, session=session)
        logger.info(f"Created document in {self.collection.name}: {document['_id']}")

        return self.to_entity(document)

    async def update(self, entity: T, session=None) -> Optional[T]:
        """
        Replace the mutable fields of an existing entity.

        Args:
            entity: Entity carrying the id to update
            session: Optional client session

        Returns:
            The updated entity, or None if no entity has that id
        """
        update_data = self.to_document(entity)
        update_data["updated_at"] = datetime.now(timezone.utc)

        document = await self.collection.find_one_and_update(
            {"_id": entity.id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
            session=session
        )

        if document is None:
            return None

        logger.info(f"Updated document in {self.collection.name}: {entity.id}")
        return self.to_entity(document)

    async def delete(self, entity_id: int, session=None) -> Optional[T]:
        """
        Delete entity by ID.

        Args:
            entity_id: Entity ID
            session: Optional client session

        Returns:
            The entity as it was before deletion, or None if not found
        """
        document = await self.collection.find_one_and_delete(
            {"_id": entity_id},
            session=session
        )

        if document is None:
            return None

        logger.info(f"Deleted document from {self.collection.name}: {entity_id}")
        return self.to_entity(document)
