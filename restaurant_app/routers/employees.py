"""
Employee router.
CRUD endpoints for employees, open to ADMIN and USER roles.
"""
from fastapi import APIRouter, Depends, Path
from typing import List
import logging

from restaurant_app.database import Database, Collections
from restaurant_app.mappers.employee_mapper import EmployeeMapper, EmployeeReadMapper
from restaurant_app.repositories.employee_repository import (
    EmployeeRepository,
    RestaurantEmployeeRepository
)
from restaurant_app.schemas.employee import EmployeeDTO
from restaurant_app.services.employee_service import EmployeeService
from restaurant_app.utils.dependencies import Roles, json_body, require_any_role

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

router = APIRouter(
    prefix="/employee",
    tags=["employee"],
    dependencies=[Depends(require_any_role(Roles.ADMIN, Roles.USER))]
)


async def get_employee_service() -> EmployeeService:
    """Get employee service with injected dependencies."""
    db = Database.get_db()
    employee_repo = EmployeeRepository(db[Collections.EMPLOYEES], db[Collections.COUNTERS])
    link_repo = RestaurantEmployeeRepository(db[Collections.RESTAURANT_EMPLOYEES])

    return EmployeeService(employee_repo, link_repo)


def get_employee_mapper() -> EmployeeMapper:
    return EmployeeMapper()


def get_employee_read_mapper() -> EmployeeReadMapper:
    return EmployeeReadMapper()


@router.get(
    "/{employee_id}",
    response_model=EmployeeDTO,
    response_model_exclude_none=True,
    summary="Get employee",
    description="Get employee by id"
)
async def get_employee(
    employee_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Employee ID"),
    service: EmployeeService = Depends(get_employee_service),
    read_mapper: EmployeeReadMapper = Depends(get_employee_read_mapper)
) -> EmployeeDTO:
    """
    Get employee by ID.

    **Raises:**
    - 404: If employee not found
    """
    return read_mapper.map_employee_to_employee_dto(
        await service.get_employee(employee_id)
    )


@router.post(
    "",
    response_model=EmployeeDTO,
    response_model_exclude_none=True,
    summary="Create employee",
    description="Create a new employee; any id in the body is ignored"
)
async def create_employee(
    employee_dto: EmployeeDTO = Depends(json_body(EmployeeDTO)),
    service: EmployeeService = Depends(get_employee_service),
    mapper: EmployeeMapper = Depends(get_employee_mapper)
) -> EmployeeDTO:
    """
    Create a new employee.

    **Returns:**
    - The created employee with its assigned id

    **Raises:**
    - 400: If the payload is invalid
    """
    employee = mapper.map_employee_dto_to_employee(employee_dto)

    return mapper.map_employee_to_employee_dto(
        await service.create_employee(employee)
    )


@router.put(
    "/{employee_id}",
    response_model=EmployeeDTO,
    response_model_exclude_none=True,
    summary="Edit employee",
    description="Replace every attribute of an employee"
)
async def edit_employee(
    employee_to_edit: EmployeeDTO = Depends(json_body(EmployeeDTO)),
    employee_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Employee ID"),
    service: EmployeeService = Depends(get_employee_service),
    mapper: EmployeeMapper = Depends(get_employee_mapper)
) -> EmployeeDTO:
    """
    Edit employee.

    Attributes missing from the body are cleared. The id in the path wins
    over any id in the body.

    **Raises:**
    - 400: If the payload is invalid
    - 404: If employee not found
    """
    employee = mapper.map_employee_dto_to_employee(employee_to_edit, employee_id=employee_id)

    return mapper.map_employee_to_employee_dto(
        await service.edit_employee(employee_id, employee)
    )


@router.delete(
    "/{employee_id}",
    response_model=EmployeeDTO,
    response_model_exclude_none=True,
    summary="Delete employee",
    description="Delete an employee and return it as it was"
)
async def delete_employee(
    employee_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Employee ID"),
    service: EmployeeService = Depends(get_employee_service),
    mapper: EmployeeMapper = Depends(get_employee_mapper)
) -> EmployeeDTO:
    """
    Delete employee.

    Restaurant links of the employee are removed; restaurants are kept.

    **Raises:**
    - 404: If employee not found
    """
    return mapper.map_employee_to_employee_dto(
        await service.delete_employee(employee_id)
    )


@router.get(
    "",
    response_model=List[EmployeeDTO],
    response_model_exclude_none=True,
    summary="List employees",
    description="Get every employee"
)
async def get_all_employees(
    service: EmployeeService = Depends(get_employee_service),
    read_mapper: EmployeeReadMapper = Depends(get_employee_read_mapper)
) -> List[EmployeeDTO]:
    return read_mapper.map_employee_list_to_employee_dto_list(
        await service.get_all_employees()
    )
