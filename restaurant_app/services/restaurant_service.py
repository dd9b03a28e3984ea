"""
Restaurant service.
Business operations on restaurants, their menus and employee links.
"""
from typing import Iterable, List
import logging

from restaurant_app.database import Database
from restaurant_app.exceptions import NotFoundError
from restaurant_app.models.restaurant import Restaurant
from restaurant_app.repositories.employee_repository import (
    EmployeeRepository,
    RestaurantEmployeeRepository
)
from restaurant_app.repositories.restaurant_repository import RestaurantRepository
from restaurant_app.services.employee_service import UnitOfWork

logger = logging.getLogger(__name__)


class RestaurantService:
    """Service for restaurant operations."""

    def __init__(
        self,
        restaurant_repo: RestaurantRepository,
        employee_repo: EmployeeRepository,
        link_repo: RestaurantEmployeeRepository,
        unit_of_work: UnitOfWork = Database.transaction
    ):
        self.restaurant_repo = restaurant_repo
        self.employee_repo = employee_repo
        self.link_repo = link_repo
        self.unit_of_work = unit_of_work

    async def get_restaurant(self, restaurant_id: int) -> Restaurant:
        """
        Get restaurant by ID, with menu and employees.

        Raises:
            NotFoundError: If restaurant not found
        """
        async with self.unit_of_work() as session:
            restaurant = await self.restaurant_repo.find_by_id(restaurant_id, session=session)

        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)

        return restaurant

    async def create_restaurant(
        self,
        restaurant: Restaurant,
        employee_ids: Iterable[int] = ()
    ) -> Restaurant:
        """
        Create a restaurant, its menu and its employee links.

        Raises:
            ValidationError: If a linked employee does not exist
        """
        logger.info(f"Creating restaurant: {restaurant.name}")

        async with self.unit_of_work() as session:
            created = await self.restaurant_repo.insert(
                restaurant,
                session=session,
                employee_ids=employee_ids
            )

        logger.info(f"Restaurant created: {created.id}")
        return created

    async def edit_restaurant(
        self,
        restaurant_id: int,
        restaurant: Restaurant,
        employee_ids: Iterable[int] = ()
    ) -> Restaurant:
        """
        Overwrite a restaurant's attributes, menu and employee links.

        Raises:
            NotFoundError: If restaurant not found
            ValidationError: If a linked employee does not exist
        """
        logger.info(f"Updating restaurant: {restaurant_id}")

        async with self.unit_of_work() as session:
            updated = await self.restaurant_repo.update(
                restaurant.model_copy(update={"id": restaurant_id}),
                session=session,
                employee_ids=employee_ids
            )

        if updated is None:
            raise NotFoundError("Restaurant", restaurant_id)

        logger.info(f"Restaurant updated: {restaurant_id}")
        return updated

    async def delete_restaurant(self, restaurant_id: int) -> Restaurant:
        """
        Delete a restaurant and its menu; employees are kept.

        Returns:
            The restaurant as it was immediately before deletion

        Raises:
            NotFoundError: If restaurant not found
        """
        logger.warning(f"Deleting restaurant: {restaurant_id}")

        async with self.unit_of_work() as session:
            deleted = await self.restaurant_repo.delete(restaurant_id, session=session)

        if deleted is None:
            raise NotFoundError("Restaurant", restaurant_id)

        logger.info(f"Restaurant deleted: {restaurant_id}")
        return deleted

    async def get_all_restaurants(self) -> List[Restaurant]:
        async with self.unit_of_work() as session:
            return await self.restaurant_repo.find_all(session=session)

    async def add_employee(self, restaurant_id: int, employee_id: int) -> Restaurant:
        """
        Link an existing employee to a restaurant.

        Raises:
            NotFoundError: If the restaurant or the employee does not exist
            DuplicateError: If they are already linked
        """
        async with self.unit_of_work() as session:
            await self._require(restaurant_id, employee_id, session)
            await self.link_repo.add(restaurant_id, employee_id, session=session)
            return await self.restaurant_repo.find_by_id(restaurant_id, session=session)

    async def remove_employee(self, restaurant_id: int, employee_id: int) -> Restaurant:
        """
        Unlink an employee from a restaurant.

        Raises:
            NotFoundError: If the restaurant, the employee or the link does not exist
        """
        async with self.unit_of_work() as session:
            await self._require(restaurant_id, employee_id, session)
            if not await self.link_repo.remove(restaurant_id, employee_id, session=session):
                raise NotFoundError(
                    "RestaurantEmployee",
                    f"{restaurant_id},{employee_id}"
                )
            return await self.restaurant_repo.find_by_id(restaurant_id, session=session)

    async def _require(self, restaurant_id: int, employee_id: int, session) -> None:
        if not await self.restaurant_repo.exists(restaurant_id, session=session):
            raise NotFoundError("Restaurant", restaurant_id)
        if not await self.employee_repo.exists(employee_id, session=session):
            raise NotFoundError("Employee", employee_id)
