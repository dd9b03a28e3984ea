"""
HTTP routers.
"""
from restaurant_app.routers.employees import router as employee_router
from restaurant_app.routers.restaurants import router as restaurant_router

__all__ = ["employee_router", "restaurant_router"]
