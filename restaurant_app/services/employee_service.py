"""
Employee service.
Business operations on employees; every operation is one unit of work.
"""
from typing import Any, AsyncContextManager, Callable, List, Optional
import logging

from restaurant_app.database import Database
from restaurant_app.exceptions import NotFoundError, ValidationError
from restaurant_app.models.employee import Employee
from restaurant_app.repositories.employee_repository import (
    EmployeeRepository,
    RestaurantEmployeeRepository
)

logger = logging.getLogger(__name__)

UnitOfWork = Callable[[], AsyncContextManager[Optional[Any]]]


class EmployeeService:
    """Service for employee operations."""

    def __init__(
        self,
        employee_repo: EmployeeRepository,
        link_repo: RestaurantEmployeeRepository,
        unit_of_work: UnitOfWork = Database.transaction
    ):
        """
        Initialize employee service.

        Args:
            employee_repo: Employee repository instance
            link_repo: restaurant_employee repository instance
            unit_of_work: Factory of transaction scopes
        """
        self.employee_repo = employee_repo
        self.link_repo = link_repo
        self.unit_of_work = unit_of_work

    def _validate(self, employee: Employee) -> None:
        """
        Guard for callers that use the service directly with entities built
        via `model_construct` or mutated after validation. HTTP input is
        already rejected by EmployeeDTO.

        Raises:
            ValidationError: If a required attribute is blank
        """
        if not employee.name or not employee.name.strip():
            raise ValidationError(
                "Employee name is required",
                details={"field": "name"}
            )

    async def get_employee(self, employee_id: int) -> Employee:
        """
        Get employee by ID.

        Raises:
            NotFoundError: If employee not found
        """
        async with self.unit_of_work() as session:
            employee = await self.employee_repo.find_by_id(employee_id, session=session)

        if employee is None:
            raise NotFoundError("Employee", employee_id)

        return employee

    async def create_employee(self, employee: Employee) -> Employee:
        """
        Persist a new employee.

        Returns:
            The employee with its assigned id

        Raises:
            ValidationError: If required attributes are missing
        """
        self._validate(employee)
        logger.info(f"Creating employee: {employee.name}")

        async with self.unit_of_work() as session:
            created = await self.employee_repo.insert(employee, session=session)

        logger.info(f"Employee created: {created.id}")
        return created

    async def edit_employee(self, employee_id: int, employee: Employee) -> Employee:
        """
        Overwrite every mutable attribute of an employee.

        The id comes from `employee_id`, never from `employee`. Attributes
        left unset on `employee` are stored as null.

        Raises:
            NotFoundError: If employee not found
            ValidationError: If required attributes are missing
        """
        self._validate(employee)
        logger.info(f"Updating employee: {employee_id}")

        async with self.unit_of_work() as session:
            if await self.employee_repo.find_by_id(employee_id, session=session) is None:
                raise NotFoundError("Employee", employee_id)

            updated = await self.employee_repo.update(
                employee.model_copy(update={"id": employee_id}),
                session=session
            )
            if updated is None:
                raise NotFoundError("Employee", employee_id)

        logger.info(f"Employee updated: {employee_id}")
        return updated

    async def delete_employee(self, employee_id: int) -> Employee:
        """
        Delete an employee and its restaurant links. Restaurants are kept.

        Returns:
            The employee as it was immediately before deletion

        Raises:
            NotFoundError: If employee not found
        """
        logger.warning(f"Deleting employee: {employee_id}")

        async with self.unit_of_work() as session:
            if await self.employee_repo.find_by_id(employee_id, session=session) is None:
                raise NotFoundError("Employee", employee_id)

            await self.link_repo.delete_by_employee(employee_id, session=session)
            deleted = await self.employee_repo.delete(employee_id, session=session)
            if deleted is None:
                raise NotFoundError("Employee", employee_id)

        logger.info(f"Employee deleted: {employee_id}")
        return deleted

    async def get_all_employees(self) -> List[Employee]:
        async with self.unit_of_work() as session:
            return await self.employee_repo.find_all(session=session)
