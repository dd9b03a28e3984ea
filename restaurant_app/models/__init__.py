"""
Persisted entities.
"""
from restaurant_app.models.employee import Employee
from restaurant_app.models.restaurant import Menu, Restaurant

__all__ = ["Employee", "Menu", "Restaurant"]
