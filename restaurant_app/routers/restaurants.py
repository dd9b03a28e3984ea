"""
Restaurant router.
CRUD endpoints for restaurants (menu included) and their employee links.
"""
from fastapi import APIRouter, Depends, Path
from typing import List
import logging

from restaurant_app.database import Database, Collections
from restaurant_app.mappers.restaurant_mapper import RestaurantMapper, RestaurantReadMapper
from restaurant_app.repositories.employee_repository import (
    EmployeeRepository,
    RestaurantEmployeeRepository
)
from restaurant_app.repositories.restaurant_repository import MenuRepository, RestaurantRepository
from restaurant_app.routers.employees import INT64_MAX, INT64_MIN
from restaurant_app.schemas.restaurant import RestaurantDTO, RestaurantRequestDTO
from restaurant_app.services.restaurant_service import RestaurantService
from restaurant_app.utils.dependencies import Roles, json_body, require_any_role

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/restaurant",
    tags=["restaurant"],
    dependencies=[Depends(require_any_role(Roles.ADMIN, Roles.USER))]
)


async def get_restaurant_service() -> RestaurantService:
    """Get restaurant service with injected dependencies."""
    db = Database.get_db()
    counters = db[Collections.COUNTERS]
    employee_repo = EmployeeRepository(db[Collections.EMPLOYEES], counters)
    link_repo = RestaurantEmployeeRepository(db[Collections.RESTAURANT_EMPLOYEES])
    restaurant_repo = RestaurantRepository(
        db[Collections.RESTAURANTS],
        counters,
        MenuRepository(db[Collections.MENUS], counters),
        employee_repo,
        link_repo
    )

    return RestaurantService(restaurant_repo, employee_repo, link_repo)


def get_restaurant_mapper() -> RestaurantMapper:
    return RestaurantMapper()


def get_restaurant_read_mapper() -> RestaurantReadMapper:
    return RestaurantReadMapper()


@router.get(
    "/{restaurant_id}",
    response_model=RestaurantDTO,
    response_model_exclude_none=True,
    summary="Get restaurant",
    description="Get restaurant by id with its menu and employees"
)
async def get_restaurant(
    restaurant_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Restaurant ID"),
    service: RestaurantService = Depends(get_restaurant_service),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> RestaurantDTO:
    return read_mapper.map_restaurant_to_restaurant_dto(
        await service.get_restaurant(restaurant_id)
    )


@router.post(
    "",
    response_model=RestaurantDTO,
    response_model_exclude_none=True,
    summary="Create restaurant",
    description="Create a restaurant, its menu and its employee links"
)
async def create_restaurant(
    request: RestaurantRequestDTO = Depends(json_body(RestaurantRequestDTO)),
    service: RestaurantService = Depends(get_restaurant_service),
    mapper: RestaurantMapper = Depends(get_restaurant_mapper),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> RestaurantDTO:
    """
    Create a new restaurant.

    **Request Body:**
    - **name**, **location**: Required text
    - **capacity**: Seats, >= 0
    - **menu**: Optional `{"language": ...}`
    - **employee_ids**: Existing employees to link

    **Raises:**
    - 400: If the payload is invalid or an employee does not exist
    """
    restaurant = mapper.map_restaurant_request_to_restaurant(request)

    return read_mapper.map_restaurant_to_restaurant_dto(
        await service.create_restaurant(restaurant, request.employee_ids)
    )


@router.put(
    "/{restaurant_id}",
    response_model=RestaurantDTO,
    response_model_exclude_none=True,
    summary="Edit restaurant",
    description="Replace a restaurant's attributes, menu and employee links"
)
async def edit_restaurant(
    request: RestaurantRequestDTO = Depends(json_body(RestaurantRequestDTO)),
    restaurant_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Restaurant ID"),
    service: RestaurantService = Depends(get_restaurant_service),
    mapper: RestaurantMapper = Depends(get_restaurant_mapper),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> RestaurantDTO:
    """
    Edit restaurant.

    A body without `menu` deletes the restaurant's menu; a body with `menu`
    updates the existing one in place.

    **Raises:**
    - 400: If the payload is invalid or an employee does not exist
    - 404: If restaurant not found
    """
    restaurant = mapper.map_restaurant_request_to_restaurant(request, restaurant_id=restaurant_id)

    return read_mapper.map_restaurant_to_restaurant_dto(
        await service.edit_restaurant(restaurant_id, restaurant, request.employee_ids)
    )


@router.delete(
    "/{restaurant_id}",
    response_model=RestaurantDTO,
    response_model_exclude_none=True,
    summary="Delete restaurant",
    description="Delete a restaurant and its menu; employees are kept"
)
async def delete_restaurant(
    restaurant_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Restaurant ID"),
    service: RestaurantService = Depends(get_restaurant_service),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> RestaurantDTO:
    return read_mapper.map_restaurant_to_restaurant_dto(
        await service.delete_restaurant(restaurant_id)
    )


@router.get(
    "",
    response_model=List[RestaurantDTO],
    response_model_exclude_none=True,
    summary="List restaurants",
    description="Get every restaurant"
)
async def get_all_restaurants(
    service: RestaurantService = Depends(get_restaurant_service),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> List[RestaurantDTO]:
    return read_mapper.map_restaurant_list_to_restaurant_dto_list(
        await service.get_all_restaurants()
    )


@router.post(
    "/{restaurant_id}/employee/{employee_id}",
    response_model=RestaurantDTO,
    response_model_exclude_none=True,
    summary="Link employee",
    description="Link an existing employee to a restaurant"
)
async def add_employee(
    restaurant_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Restaurant ID"),
    employee_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Employee ID"),
    service: RestaurantService = Depends(get_restaurant_service),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> RestaurantDTO:
    """
    **Raises:**
    - 404: If the restaurant or the employee does not exist
    - 409: If the employee is already linked
    """
    return read_mapper.map_restaurant_to_restaurant_dto(
        await service.add_employee(restaurant_id, employee_id)
    )


@router.delete(
    "/{restaurant_id}/employee/{employee_id}",
    response_model=RestaurantDTO,
    response_model_exclude_none=True,
    summary="Unlink employee",
    description="Remove an employee from a restaurant"
)
async def remove_employee(
    restaurant_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Restaurant ID"),
    employee_id: int = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Employee ID"),
    service: RestaurantService = Depends(get_restaurant_service),
    read_mapper: RestaurantReadMapper = Depends(get_restaurant_read_mapper)
) -> RestaurantDTO:
    """
    **Raises:**
    - 404: If the restaurant, the employee or the link does not exist
    """
    return read_mapper.map_restaurant_to_restaurant_dto(
        await service.remove_employee(restaurant_id, employee_id)
    )
