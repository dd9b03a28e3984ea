"""
Employee repository.
Data access layer for employees and their restaurant links.
"""
from typing import Dict, Iterable, List
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

from restaurant_app.exceptions import DuplicateError
from restaurant_app.models.employee import Employee
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class EmployeeRepository(BaseRepository[Employee]):
    """Repository for employee operations."""

    model = Employee


class RestaurantEmployeeRepository:
    """
    Repository for the restaurant_employee association.

    Each document is one (restaurant_id, employee_id) pair; pairs are unique.
    Removing pairs never touches the restaurants or employees themselves.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def exists(self, restaurant_id: int, employee_id: int, session=None) -> bool:
        count = await self.collection.count_documents(
            {"restaurant_id": restaurant_id, "employee_id": employee_id},
            limit=1,
            session=session
        )
        return count > 0

    async def add(self, restaurant_id: int, employee_id: int, session=None) -> None:
        """
        Link an employee to a restaurant.

        Raises:
            DuplicateError: If the pair already exists
        """
        if await self.exists(restaurant_id, employee_id, session=session):
            raise DuplicateError(
                "RestaurantEmployee",
                "restaurant_id,employee_id",
                f"{restaurant_id},{employee_id}"
            )

        await self.collection.insert_one(
            {"restaurant_id": restaurant_id, "employee_id": employee_id},
            session=session
        )
        logger.info(f"Linked employee {employee_id} to restaurant {restaurant_id}")

    async def remove(self, restaurant_id: int, employee_id: int, session=None) -> bool:
        """
        Unlink an employee from a restaurant.

        Returns:
            True if the pair existed
        """
        result = await self.collection.delete_one(
            {"restaurant_id": restaurant_id, "employee_id": employee_id},
            session=session
        )

        if result.deleted_count > 0:
            logger.info(f"Unlinked employee {employee_id} from restaurant {restaurant_id}")
            return True

        return False

    async def employee_ids_for(self, restaurant_id: int, session=None) -> List[int]:
        links = await self.employee_ids_by_restaurant([restaurant_id], session=session)
        return links.get(restaurant_id, [])

    async def employee_ids_by_restaurant(
        self,
        restaurant_ids: Iterable[int],
        session=None
    ) -> Dict[int, List[int]]:
        """
        Linked employee ids per restaurant, each list ordered by employee id.
        """
        ids = list(restaurant_ids)
        if not ids:
            return {}

        cursor = self.collection.find(
            {"restaurant_id": {"$in": ids}},
            session=session
        ).sort("employee_id", ASCENDING)
        documents = await cursor.to_list(length=None)

        links: Dict[int, List[int]] = {}
        for doc in documents:
            links.setdefault(doc["restaurant_id"], []).append(doc["employee_id"])
        return links

    async def delete_by_restaurant(self, restaurant_id: int, session=None) -> int:
        result = await self.collection.delete_many(
            {"restaurant_id": restaurant_id},
            session=session
        )
        logger.info(f"Removed {result.deleted_count} employee links of restaurant {restaurant_id}")
        return result.deleted_count

    async def delete_by_employee(self, employee_id: int, session=None) -> int:
        result = await self.collection.delete_many(
            {"employee_id": employee_id},
            session=session
        )
        logger.info(f"Removed {result.deleted_count} restaurant links of employee {employee_id}")
        return result.deleted_count
