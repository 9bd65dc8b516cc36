from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_user
from ...services.cita_service import CitaService
from ...schemas.auth import CreatedResponse, MessageResponse, UserResponse
from ...schemas.cita import CitaCreate, CitaResponse, DoctorResponse
from ...models.user import User

router = APIRouter(prefix="/citas", tags=["Appointments"])

@router.get("/medicos", response_model=List[DoctorResponse])
async def list_doctors(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List the doctors an appointment can be booked with."""
    return CitaService(db).list_doctors()

@router.get("/mis-citas", response_model=List[CitaResponse])
async def list_my_citas(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List the caller's appointments, latest first."""
    return CitaService(db).list_for_patient(current_user.id)

@router.post("/crear", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_cita(
    cita_data: CitaCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Book an appointment for the caller."""
    cita = CitaService(db).create(current_user.id, cita_data)
    return CreatedResponse(msg="Cita solicitada con éxito", id=cita.id)

@router.put("/cancelar/{cita_id}", response_model=MessageResponse)
async def cancel_cita(
    cita_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Cancel one of the caller's pending appointments."""
    CitaService(db).cancel(cita_id, current_user.id)
    return MessageResponse(msg="Cita cancelada correctamente")

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return current_user
