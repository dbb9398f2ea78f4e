"""
Reference data Pydantic schemas (locations, departments).
"""

from backend.app.schemas.common import CamelModel


class LocationResponse(CamelModel):
    id: int
    name: str
    address: str
    is_active: bool


class DepartmentResponse(CamelModel):
    id: int
    name: str
    description: str
    is_active: bool
