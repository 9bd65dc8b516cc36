"""
Error taxonomy of the API.

Every error a caller can observe is an ``HTTPException`` subclass carrying
its status code and a short user-facing message. ``main.py`` renders them as
``{"msg": ...}``.
"""
from fastapi import HTTPException, status
from typing import Optional


class ClinicaError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Error del servidor"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(ClinicaError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Faltan datos requeridos"


class InvalidCredentials(ClinicaError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Usuario o contraseña incorrectos"


class Unauthenticated(ClinicaError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token inválido o expirado"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ClinicaError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Acceso denegado"


class NotFound(ClinicaError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Recurso no encontrado"


class PreconditionFailed(ClinicaError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "No puedes cancelar esta cita"


class Conflict(ClinicaError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "El usuario o email ya está registrado"


class InvalidReference(ClinicaError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Médico no válido"


class RateLimited(ClinicaError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Demasiadas solicitudes. Inténtalo más tarde."


class ServerError(ClinicaError):
    pass
