from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...services.admin_service import AdminService
from ...schemas.auth import MessageResponse
from ...schemas.admin import (
    AdminCitaResponse, AdminUserResponse, EstadoUpdate, RoleUpdate
)

# Every route below requires the admin role
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_admin_user)],
)

@router.get("/citas", response_model=List[AdminCitaResponse])
async def list_citas(db: Session = Depends(get_db)):
    """List every appointment with patient and doctor names."""
    return AdminService(db).list_citas()

@router.put("/citas/{cita_id}/estado", response_model=MessageResponse)
async def update_cita_estado(
    cita_id: int,
    estado_data: EstadoUpdate,
    db: Session = Depends(get_db)
):
    """Set the state of any appointment."""
    AdminService(db).set_estado(cita_id, estado_data.estado)
    return MessageResponse(msg="Estado de cita actualizado correctamente")

@router.get("/usuarios", response_model=List[AdminUserResponse])
async def list_users(db: Session = Depends(get_db)):
    return AdminService(db).list_users()

@router.get("/usuario/{user_id}", response_model=AdminUserResponse)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    return AdminService(db).get_user(user_id)

@router.put("/usuario/{user_id}/rol", response_model=MessageResponse)
async def update_user_role(
    user_id: int,
    role_data: RoleUpdate,
    db: Session = Depends(get_db)
):
    """Change the role of a user."""
    AdminService(db).set_role(user_id, role_data.role)
    return MessageResponse(msg="Rol actualizado correctamente")

@router.delete("/usuario/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Delete a user and the appointments they booked."""
    AdminService(db).delete_user(user_id)
    return MessageResponse(msg="Usuario eliminado correctamente")
