"""
Business services.
"""
from restaurant_app.services.employee_service import EmployeeService
from restaurant_app.services.restaurant_service import RestaurantService

__all__ = ["EmployeeService", "RestaurantService"]
