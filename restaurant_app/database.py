"""
MongoDB connection management.
Holds the shared Motor client, collection names, indexes and the unit of work.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from restaurant_app.config import settings
from restaurant_app.exceptions import (
    AppError,
    ConfigurationError,
    DatabaseError,
    DuplicateError
)

logger = logging.getLogger(__name__)


class Collections:
    """Collection names, one per table of the relational layout."""

    RESTAURANTS = "restaurant"
    MENUS = "menu"
    EMPLOYEES = "employee"
    RESTAURANT_EMPLOYEES = "restaurant_employee"
    COUNTERS = "counters"


class Database:
    """Process-wide database handle."""

    client: Optional[Any] = None
    db: Optional[AsyncIOMotorDatabase] = None
    transactions_enabled: bool = True

    @classmethod
    def connect(
        cls,
        client: Optional[Any] = None,
        transactions: Optional[bool] = None
    ) -> None:
        """
        Bind the client and database.

        Args:
            client: Motor-compatible client; a new AsyncIOMotorClient is
                created from MONGO_URL when omitted
            transactions: Override MONGO_TRANSACTIONS
        """
        if client is None:
            client = AsyncIOMotorClient(settings.MONGO_URL)
        cls.client = client
        cls.db = client[settings.DB_NAME]
        cls.transactions_enabled = (
            settings.MONGO_TRANSACTIONS if transactions is None else transactions
        )
        logger.info(
            f"Connected to database '{settings.DB_NAME}' "
            f"(transactions={'on' if cls.transactions_enabled else 'off'})"
        )

    @classmethod
    def is_connected(cls) -> bool:
        return cls.db is not None

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        if cls.db is None:
            raise ConfigurationError("Database is not connected")
        return cls.db

    @classmethod
    def get_client(cls) -> Any:
        if cls.client is None:
            raise ConfigurationError("Database is not connected")
        return cls.client

    @classmethod
    def close(cls) -> None:
        if cls.client is not None:
            cls.client.close()
            logger.info("Database connection closed")
        cls.client = None
        cls.db = None

    @classmethod
    async def ping(cls) -> None:
        await cls.get_db().command("ping")

    @classmethod
    async def create_indexes(cls) -> None:
        """Create the uniqueness and lookup indexes (idempotent)."""
        db = cls.get_db()

        await db[Collections.RESTAURANT_EMPLOYEES].create_index(
            [("restaurant_id", ASCENDING), ("employee_id", ASCENDING)],
            unique=True
        )
        await db[Collections.RESTAURANT_EMPLOYEES].create_index(
            [("employee_id", ASCENDING)]
        )
        # A menu belongs to at most one restaurant
        await db[Collections.RESTAURANTS].create_index(
            [("menu_id", ASCENDING)],
            unique=True,
            sparse=True
        )

        logger.info("Database indexes ensured")

    @classmethod
    @asynccontextmanager
    async def transaction(cls) -> AsyncIterator[Optional[Any]]:
        """
        Unit of work.

        Yields a session bound to an open transaction, committed on normal
        exit and aborted on any exception (cancellation included). Yields
        None when transactions are disabled.

        Raises:
            DuplicateError: On a unique index violation
            DatabaseError: On any other driver failure
        """
        try:
            if not cls.transactions_enabled:
                yield None
                return

            async with await cls.get_client().start_session() as session:
                async with session.start_transaction():
                    yield session
        except AppError:
            raise
        except DuplicateKeyError as e:
            logger.warning(f"Unique constraint violated: {e}")
            raise DuplicateError(
                "Record",
                "key",
                (e.details or {}).get("keyValue")
            ) from e
        except PyMongoError as e:
            logger.error(f"Database operation failed: {e}", exc_info=True)
            raise DatabaseError(details={"reason": str(e)}) from e

