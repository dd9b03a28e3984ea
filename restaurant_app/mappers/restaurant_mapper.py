"""
Restaurant translators.
"""
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from restaurant_app.exceptions import ValidationError
from restaurant_app.mappers.employee_mapper import EmployeeReadMapper
from restaurant_app.models.restaurant import Menu, Restaurant
from restaurant_app.schemas.restaurant import MenuDTO, RestaurantDTO, RestaurantRequestDTO


class RestaurantMapper:
    """Write-path translator from RestaurantRequestDTO to Restaurant."""

    def map_restaurant_request_to_restaurant(
        self,
        request: RestaurantRequestDTO,
        restaurant_id: Optional[int] = None
    ) -> Restaurant:
        """
        Build a restaurant without employees; links travel separately as
        `request.employee_ids`. Body ids (restaurant and menu) are dropped.

        Raises:
            ValidationError: If the payload violates an entity constraint
        """
        try:
            menu = Menu(language=request.menu.language) if request.menu else None
            return Restaurant(
                id=restaurant_id,
                name=request.name,
                location=request.location,
                capacity=request.capacity,
                menu=menu
            )
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid restaurant payload",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e


class RestaurantReadMapper:
    """Read-path translator; expands menu and employees."""

    def __init__(self, employee_read_mapper: Optional[EmployeeReadMapper] = None):
        self.employee_read_mapper = employee_read_mapper or EmployeeReadMapper()

    def map_restaurant_to_restaurant_dto(self, restaurant: Restaurant) -> RestaurantDTO:
        menu = None
        if restaurant.menu is not None:
            menu = MenuDTO(id=restaurant.menu.id, language=restaurant.menu.language)

        return RestaurantDTO(
            id=restaurant.id,
            name=restaurant.name,
            location=restaurant.location,
            capacity=restaurant.capacity,
            menu=menu,
            employees=self.employee_read_mapper.map_employee_list_to_employee_dto_list(
                restaurant.employees
            )
        )

    def map_restaurant_list_to_restaurant_dto_list(
        self,
        restaurants: List[Restaurant]
    ) -> List[RestaurantDTO]:
        return [self.map_restaurant_to_restaurant_dto(r) for r in restaurants]
