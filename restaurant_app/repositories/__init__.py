"""
Repository package.
Provides data access layer for all entities.
"""
from .base_repository import BaseRepository
from .employee_repository import EmployeeRepository, RestaurantEmployeeRepository
from .restaurant_repository import MenuRepository, RestaurantRepository

__all__ = [
    "BaseRepository",
    "EmployeeRepository",
    "RestaurantEmployeeRepository",
    "MenuRepository",
    "RestaurantRepository",
]
