"""
Translators between wire models and entities.
"""
from restaurant_app.mappers.employee_mapper import EmployeeMapper, EmployeeReadMapper
from restaurant_app.mappers.restaurant_mapper import RestaurantMapper, RestaurantReadMapper

__all__ = [
    "EmployeeMapper",
    "EmployeeReadMapper",
    "RestaurantMapper",
    "RestaurantReadMapper",
]
