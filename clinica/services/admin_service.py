from sqlalchemy.orm import Session, aliased
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from ..models.cita import Cita, CitaEstado
from ..models.user import User
from ..core.exceptions import Conflict, NotFound, ServerError, ValidationError
from ..core.security import UserRole
from ..schemas.admin import AdminCitaResponse

logger = logging.getLogger(__name__)

class AdminService:
    """Privileged operations. None of them checks ownership or the current state."""

    def __init__(self, db: Session):
        self.db = db

    def list_citas(self) -> List[AdminCitaResponse]:
        paciente = aliased(User)
        medico = aliased(User)
        rows = (
            self.db.query(Cita, paciente.full_name, medico.full_name)
            .join(paciente, paciente.id == Cita.paciente_id)
            .join(medico, medico.id == Cita.medico_id)
            .order_by(Cita.fecha_hora.desc(), Cita.id.desc())
            .all()
        )

        citas = []
        for cita, paciente_name, medico_name in rows:
            response = AdminCitaResponse.model_validate(cita)
            response.paciente_name = paciente_name
            response.medico_name = medico_name
            citas.append(response)
        return citas

    def set_estado(self, cita_id: int, estado: str) -> None:
        """Overwrite the state of an appointment, whatever it currently is."""
        try:
            nuevo_estado = CitaEstado(estado)
        except ValueError:
            raise ValidationError("Estado no válido")

        self._update_one(
            self.db.query(Cita).filter(Cita.id == cita_id),
            {Cita.estado: nuevo_estado},
            "Cita no encontrada",
            f"set appointment {cita_id} to {nuevo_estado.value}",
        )

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.full_name).all()

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("Usuario no encontrado")
        return user

    def set_role(self, user_id: int, role: str) -> None:
        try:
            nuevo_rol = UserRole(role)
        except ValueError:
            raise ValidationError("Rol no válido")

        self._update_one(
            self.db.query(User).filter(User.id == user_id),
            {User.role: nuevo_rol},
            "Usuario no encontrado",
            f"set role of user {user_id} to {nuevo_rol.value}",
        )

    def delete_user(self, user_id: int) -> None:
        """Delete a user together with the appointments they booked as patient.

        Both deletions are committed as one transaction. A user still assigned
        as doctor on any appointment is refused, so no appointment is left
        pointing at a missing doctor.
        """
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
            if not user:
                raise NotFound("Usuario no encontrado")

            como_medico = self.db.query(Cita).filter(Cita.medico_id == user_id).count()
            if como_medico:
                raise Conflict(
                    f"El usuario tiene {como_medico} cita(s) asignadas como médico"
                )

            deleted_citas = (
                self.db.query(Cita)
                .filter(Cita.paciente_id == user_id)
                .delete(synchronize_session=False)
            )
            self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to delete user {user_id}")
            raise ServerError("Error al eliminar usuario")
        finally:
            # Releases the read transaction when NotFound or Conflict is raised
            if self.db.in_transaction():
                self.db.rollback()

        logger.info(f"Deleted user {user_id} and {deleted_citas} appointment(s)")

    def _update_one(self, query, values: dict, not_found: str, action: str) -> None:
        try:
            updated = query.update(values, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to {action}")
            raise ServerError()

        if updated == 0:
            raise NotFound(not_found)

        logger.info(f"Admin: {action}")
