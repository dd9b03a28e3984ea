"""
Restaurant and menu repositories.

A restaurant document references its menu through `menu_id` and its
employees through restaurant_employee pairs. Menus are only written through
RestaurantRepository, which applies the cascade rules:

- insert: menu first, then the restaurant, then one pair per employee
- update: menu merged in place (or created/removed), pairs synchronized
- delete: pairs, then the restaurant, then its menu
"""
from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime, timezone
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument

from restaurant_app.exceptions import ValidationError
from restaurant_app.models.restaurant import Menu, Restaurant
from .base_repository import BaseRepository
from .employee_repository import EmployeeRepository, RestaurantEmployeeRepository

logger = logging.getLogger(__name__)


class MenuRepository(BaseRepository[Menu]):
    """Repository for menus."""

    model = Menu


class RestaurantRepository(BaseRepository[Restaurant]):
    """Repository for the restaurant aggregate."""

    model = Restaurant

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        counters: AsyncIOMotorCollection,
        menu_repo: MenuRepository,
        employee_repo: EmployeeRepository,
        link_repo: RestaurantEmployeeRepository
    ):
        super().__init__(collection, counters)
        self.menu_repo = menu_repo
        self.employee_repo = employee_repo
        self.link_repo = link_repo

    def to_document(self, restaurant: Restaurant) -> Dict[str, Any]:
        return {
            "name": restaurant.name,
            "location": restaurant.location,
            "capacity": restaurant.capacity,
        }

    async def _assemble(
        self,
        documents: List[Dict[str, Any]],
        session=None
    ) -> List[Restaurant]:
        """Load menus and employees for a batch of restaurant documents."""
        menu_ids = [doc["menu_id"] for doc in documents if doc.get("menu_id") is not None]
        menus = {
            menu.id: menu
            for menu in await self.menu_repo.find_by_ids(menu_ids, session=session)
        }

        links = await self.link_repo.employee_ids_by_restaurant(
            [doc["_id"] for doc in documents],
            session=session
        )
        employee_ids = sorted({eid for ids in links.values() for eid in ids})
        employees = {
            employee.id: employee
            for employee in await self.employee_repo.find_by_ids(employee_ids, session=session)
        }

        restaurants = []
        for doc in documents:
            restaurants.append(Restaurant(
                id=doc["_id"],
                name=doc["name"],
                location=doc["location"],
                capacity=doc["capacity"],
                menu=menus.get(doc.get("menu_id")),
                employees=[
                    employees[eid]
                    for eid in links.get(doc["_id"], [])
                    if eid in employees
                ]
            ))
        return restaurants

    async def _require_employees(self, employee_ids: List[int], session=None) -> None:
        """
        Raises:
            ValidationError: If any listed employee does not exist
        """
        found = await self.employee_repo.find_by_ids(employee_ids, session=session)
        missing = sorted(set(employee_ids) - {employee.id for employee in found})
        if missing:
            raise ValidationError(
                "Unknown employees cannot be linked to a restaurant",
                details={"missing_employee_ids": missing}
            )

    @staticmethod
    def _unique(employee_ids: Iterable[int]) -> List[int]:
        return list(dict.fromkeys(employee_ids))

    async def find_by_id(self, restaurant_id: int, session=None) -> Optional[Restaurant]:
        restaurants = await self.find_by_ids([restaurant_id], session=session)
        return restaurants[0] if restaurants else None

    async def find_by_ids(self, restaurant_ids: Iterable[int], session=None) -> List[Restaurant]:
        """Restaurants whose id is listed, ordered by id, menus and employees loaded."""
        ids = list(restaurant_ids)
        if not ids:
            return []

        cursor = self.collection.find(
            {"_id": {"$in": ids}},
            session=session
        ).sort("_id", ASCENDING)
        return await self._assemble(await cursor.to_list(length=None), session=session)

    async def find_all(self, session=None) -> List[Restaurant]:
        cursor = self.collection.find({}, session=session).sort("_id", ASCENDING)
        return await self._assemble(await cursor.to_list(length=None), session=session)

    async def insert(
        self,
        restaurant: Restaurant,
        session=None,
        employee_ids: Iterable[int] = ()
    ) -> Restaurant:
        """
        Insert a restaurant with its menu and employee links.

        Args:
            restaurant: Restaurant to persist (id and menu id are ignored)
            session: Optional client session
            employee_ids: Existing employees to link

        Returns:
            The persisted restaurant, fully loaded

        Raises:
            ValidationError: If an employee does not exist
        """
        employee_ids = self._unique(employee_ids)
        await self._require_employees(employee_ids, session=session)

        document = self.to_document(restaurant)
        document["_id"] = await self.next_id()

        if restaurant.menu is not None:
            menu = await self.menu_repo.insert(restaurant.menu, session=session)
            document["menu_id"] = menu.id

        now = datetime.now(timezone.utc)
        document["created_at"] = now
        document["updated_at"] = now

        await self.collection.insert_one(document, session=session)
        logger.info(f"Created document in {self.collection.name}: {document['_id']}")

        for employee_id in employee_ids:
            await self.link_repo.add(document["_id"], employee_id, session=session)

        return await self.find_by_id(document["_id"], session=session)

    async def update(
        self,
        restaurant: Restaurant,
        session=None,
        employee_ids: Iterable[int] = ()
    ) -> Optional[Restaurant]:
        """
        Replace a restaurant's attributes, menu and employee links.

        A menu on the entity is merged into the owned menu (keeping its id)
        or created; no menu on the entity deletes the owned one.

        Returns:
            The updated restaurant, or None if no restaurant has that id

        Raises:
            ValidationError: If an employee does not exist
        """
        existing = await self.collection.find_one({"_id": restaurant.id}, session=session)
        if existing is None:
            return None

        employee_ids = self._unique(employee_ids)
        await self._require_employees(employee_ids, session=session)

        update_data = self.to_document(restaurant)
        update_data["updated_at"] = datetime.now(timezone.utc)
        update: Dict[str, Any] = {"$set": update_data}

        menu_id = existing.get("menu_id")
        orphan_menu_id = None

        if restaurant.menu is not None:
            merged = None
            if menu_id is not None:
                merged = await self.menu_repo.update(
                    Menu(id=menu_id, language=restaurant.menu.language),
                    session=session
                )
            if merged is None:
                menu = await self.menu_repo.insert(restaurant.menu, session=session)
                update_data["menu_id"] = menu.id
        elif menu_id is not None:
            update["$unset"] = {"menu_id": ""}
            orphan_menu_id = menu_id

        await self.collection.find_one_and_update(
            {"_id": restaurant.id},
            update,
            return_document=ReturnDocument.AFTER,
            session=session
        )

        if orphan_menu_id is not None:
            await self.menu_repo.delete(orphan_menu_id, session=session)

        current = set(await self.link_repo.employee_ids_for(restaurant.id, session=session))
        wanted = set(employee_ids)
        for employee_id in sorted(wanted - current):
            await self.link_repo.add(restaurant.id, employee_id, session=session)
        for employee_id in sorted(current - wanted):
            await self.link_repo.remove(restaurant.id, employee_id, session=session)

        logger.info(f"Updated document in {self.collection.name}: {restaurant.id}")
        return await self.find_by_id(restaurant.id, session=session)

    async def delete(self, restaurant_id: int, session=None) -> Optional[Restaurant]:
        """
        Delete a restaurant, its employee links and its menu.
        Employees are kept.

        Returns:
            The restaurant as it was before deletion, or None if not found
        """
        restaurant = await self.find_by_id(restaurant_id, session=session)
        if restaurant is None:
            return None

        await self.link_repo.delete_by_restaurant(restaurant_id, session=session)
        await self.collection.delete_one({"_id": restaurant_id}, session=session)

        if restaurant.menu is not None:
            await self.menu_repo.delete(restaurant.menu.id, session=session)

        logger.info(f"Deleted document from {self.collection.name}: {restaurant_id}")
        return restaurant
