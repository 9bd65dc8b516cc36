from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from ..core.security import UserRole
from .cita import CitaResponse

# Values are checked by AdminService so that an unknown one yields its own message
class EstadoUpdate(BaseModel):
    estado: str

class RoleUpdate(BaseModel):
    role: str

class AdminCitaResponse(CitaResponse):
    paciente_name: Optional[str] = None

class AdminUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    full_name: str = Field(alias="fullName")
    username: str
    email: str
    role: UserRole
