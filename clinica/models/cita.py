from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class CitaEstado(str, enum.Enum):
    PENDIENTE = "pendiente"
    CONFIRMADA = "confirmada"
    ATENDIDA = "atendida"
    CANCELADA = "cancelada"

class Cita(Base):
    __tablename__ = "citas"

    id = Column(Integer, primary_key=True, index=True)

    # Patient who booked it and the doctor it is booked with
    paciente_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    medico_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Appointment details
    fecha_hora = Column(DateTime, nullable=False, index=True)
    motivo = Column(Text, nullable=False)
    estado = Column(
        SQLEnum(
            CitaEstado,
            name="cita_estado",
            values_callable=lambda estados: [estado.value for estado in estados],
        ),
        nullable=False,
        default=CitaEstado.PENDIENTE,
    )

    # Tracking
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    paciente = relationship("User", foreign_keys=[paciente_id])
    medico = relationship("User", foreign_keys=[medico_id])

    def __repr__(self):
        return f"<Cita(id={self.id}, paciente_id={self.paciente_id}, medico_id={self.medico_id}, estado='{self.estado}')>"
