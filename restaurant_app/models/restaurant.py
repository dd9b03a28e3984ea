"""
Restaurant aggregate.
A restaurant exclusively owns its menu and links to existing employees.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from restaurant_app.models.employee import Employee


class Menu(BaseModel):
    """Menu record, owned by exactly one restaurant."""

    id: Optional[int] = None
    language: str = Field(..., min_length=1, max_length=50)


class Restaurant(BaseModel):
    """Restaurant record with its menu and employees loaded."""

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(0, ge=0)
    menu: Optional[Menu] = None
    employees: List[Employee] = Field(default_factory=list)

    @property
    def employee_ids(self) -> List[int]:
        return [employee.id for employee in self.employees]
