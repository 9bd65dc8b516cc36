from sqlalchemy.orm import Session, aliased
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import List
import logging

from ..models.cita import Cita, CitaEstado
from ..models.user import User
from ..core.exceptions import Conflict, InvalidReference, PreconditionFailed, ServerError
from ..core.security import UserRole
from ..schemas.cita import CitaCreate, CitaResponse

logger = logging.getLogger(__name__)

class CitaService:
    """Appointment operations available to any authenticated user.

    A patient only ever sees and mutates the appointments where they are
    ``paciente_id``; the only transition open to them is
    ``pendiente -> cancelada``.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_doctors(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == UserRole.DOCTOR)
            .order_by(User.full_name)
            .all()
        )

    def list_for_patient(self, paciente_id: int) -> List[CitaResponse]:
        """Appointments of ``paciente_id``, latest first, with the doctor's name."""
        medico = aliased(User)
        rows = (
            self.db.query(Cita, medico.full_name)
            .join(medico, medico.id == Cita.medico_id)
            .filter(Cita.paciente_id == paciente_id)
            .order_by(Cita.fecha_hora.desc(), Cita.id.desc())
            .all()
        )

        citas = []
        for cita, medico_name in rows:
            response = CitaResponse.model_validate(cita)
            response.medico_name = medico_name
            citas.append(response)
        return citas

    def create(self, paciente_id: int, cita_data: CitaCreate) -> Cita:
        """Book an appointment in state ``pendiente``.

        The doctor must exist and hold the doctor role. A doctor cannot hold
        two live appointments at the same instant; cancelled ones free the slot.
        """
        medico = self.db.query(User).filter(User.id == cita_data.medico_id).first()
        if not medico or medico.role != UserRole.DOCTOR:
            raise InvalidReference()

        taken = self.db.query(Cita).filter(
            Cita.medico_id == cita_data.medico_id,
            Cita.fecha_hora == cita_data.fecha_hora,
            Cita.estado != CitaEstado.CANCELADA,
        ).first()
        if taken:
            raise Conflict("El médico ya tiene una cita en ese horario")

        cita = Cita(
            paciente_id=paciente_id,
            medico_id=cita_data.medico_id,
            fecha_hora=cita_data.fecha_hora,
            motivo=cita_data.motivo,
            estado=CitaEstado.PENDIENTE,
        )
        self.db.add(cita)
        try:
            self.db.commit()
        except IntegrityError:
            # Foreign key violation, the doctor was removed meanwhile
            self.db.rollback()
            raise InvalidReference()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to create appointment for patient {paciente_id}")
            raise ServerError("Error al crear la cita")
        self.db.refresh(cita)

        logger.info(f"Patient {paciente_id} booked appointment {cita.id} with doctor {cita.medico_id}")
        return cita

    def cancel(self, cita_id: int, paciente_id: int) -> None:
        """Cancel a pending appointment owned by ``paciente_id``.

        Missing, foreign and non-pending appointments all fail the same way,
        so a caller cannot probe for appointments that are not theirs.
        """
        try:
            updated = (
                self.db.query(Cita)
                .filter(
                    Cita.id == cita_id,
                    Cita.paciente_id == paciente_id,
                    Cita.estado == CitaEstado.PENDIENTE,
                )
                .update({Cita.estado: CitaEstado.CANCELADA}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to cancel appointment {cita_id}")
            raise ServerError()

        if updated == 0:
            raise PreconditionFailed()

        logger.info(f"Patient {paciente_id} cancelled appointment {cita_id}")
