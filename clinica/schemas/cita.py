from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from datetime import datetime, timezone
from typing import Optional

from ..models.cita import CitaEstado
from .auth import NonEmptyStr

class CitaCreate(BaseModel):
    medico_id: PositiveInt
    fecha_hora: datetime
    motivo: NonEmptyStr

    @field_validator("fecha_hora")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Stored naive; offset-aware input is converted to UTC first
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

class CitaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    paciente_id: int
    medico_id: int
    fecha_hora: datetime
    motivo: str
    estado: CitaEstado
    created_at: Optional[datetime] = None
    medico_name: Optional[str] = None

class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    full_name: str = Field(alias="fullName")
