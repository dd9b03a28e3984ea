"""
Wire models exchanged over HTTP.
"""
from restaurant_app.schemas.employee import EmployeeDTO
from restaurant_app.schemas.restaurant import MenuDTO, RestaurantDTO, RestaurantRequestDTO

__all__ = ["EmployeeDTO", "MenuDTO", "RestaurantDTO", "RestaurantRequestDTO"]
