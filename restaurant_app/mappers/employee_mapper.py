"""
Employee translators.

Two directions:
- EmployeeMapper is the write path (create, edit, delete). It consumes client
  input, decides which id the entity gets and renders the affected record.
- EmployeeReadMapper is the read path (get, list). It only renders.
"""
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from restaurant_app.exceptions import ValidationError
from restaurant_app.models.employee import Employee
from restaurant_app.schemas.employee import EmployeeDTO


class EmployeeMapper:
    """Write-path translator between EmployeeDTO and Employee."""

    def map_employee_dto_to_employee(
        self,
        employee_dto: EmployeeDTO,
        employee_id: Optional[int] = None
    ) -> Employee:
        """
        Build an entity from client input.

        The DTO id is never trusted: pass None on create so the store
        assigns one, or the path id on edit and delete.

        Raises:
            ValidationError: If the payload violates an entity constraint
        """
        try:
            return Employee(
                id=employee_id,
                **employee_dto.model_dump(exclude={"id"})
            )
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid employee payload",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

    def map_employee_to_employee_dto(self, employee: Employee) -> EmployeeDTO:
        return EmployeeDTO(**employee.model_dump())


class EmployeeReadMapper:
    """Read-path translator from Employee to EmployeeDTO."""

    def map_employee_to_employee_dto(self, employee: Employee) -> EmployeeDTO:
        return EmployeeDTO.model_validate(employee, from_attributes=True)

    def map_employee_list_to_employee_dto_list(
        self,
        employees: List[Employee]
    ) -> List[EmployeeDTO]:
        return [self.map_employee_to_employee_dto(employee) for employee in employees]
