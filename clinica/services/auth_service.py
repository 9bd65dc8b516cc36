from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import or_
import logging

from ..models.user import User
from ..core.config import settings
from ..core.exceptions import (
    Conflict, Forbidden, InvalidCredentials, NotFound, ServerError, ValidationError
)
from ..core.security import (
    verify_password, get_password_hash, create_access_token, UserRole
)
from ..schemas.auth import (
    UserLogin, UserRegister, LoginResponse, PasswordReset, ChangePassword
)

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new patient account."""
        email = user_data.email.lower()

        existing_user = self.db.query(User).filter(
            or_(User.username == user_data.username, User.email == email)
        ).first()

        if existing_user:
            raise Conflict()

        new_user = User(
            username=user_data.username,
            email=email,
            password_hash=get_password_hash(user_data.password),
            full_name=user_data.full_name,
            role=UserRole.USER,
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise Conflict()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to register user {user_data.username}")
            raise ServerError()
        self.db.refresh(new_user)

        logger.info(f"Registered user {new_user.username} (id={new_user.id})")
        return new_user

    def authenticate_user(self, login_data: UserLogin) -> LoginResponse:
        """Authenticate by username or email and issue an access token."""
        identifier = login_data.username
        user = self.db.query(User).filter(
            or_(User.username == identifier, User.email == identifier.lower())
        ).first()

        # Same error whichever check failed
        if not user or not verify_password(login_data.password, user.password_hash):
            raise InvalidCredentials()

        return LoginResponse(
            token=create_access_token(user.id, user.role),
            role=user.role,
            username=user.username,
            full_name=user.full_name,
        )

    def reset_password(self, reset_data: PasswordReset) -> None:
        """Overwrite a password knowing only the username.

        No proof of identity is asked for; the endpoint exists for the
        current web client and can be turned off with PASSWORD_RESET_ENABLED.
        """
        if not settings.PASSWORD_RESET_ENABLED:
            raise Forbidden("El restablecimiento de contraseña está deshabilitado")

        user = self.db.query(User).filter(
            User.username == reset_data.username
        ).first()
        if not user:
            raise NotFound("Usuario no encontrado")

        user.password_hash = get_password_hash(reset_data.new_password)
        self._commit(f"reset password of user {user.id}")

        logger.warning(f"Password of user {user.username} (id={user.id}) reset without verification")

    def change_password(self, user: User, password_data: ChangePassword) -> None:
        """Change the password of an authenticated user."""
        if not verify_password(password_data.current_password, user.password_hash):
            raise ValidationError("La contraseña actual es incorrecta")

        user.password_hash = get_password_hash(password_data.new_password)
        self._commit(f"change password of user {user.id}")

        logger.info(f"User {user.id} changed password")

    def ensure_admin(self, username: str, password: str, email: str, full_name: str) -> User:
        """Create the bootstrap admin unless a user with that username exists."""
        user = self.db.query(User).filter(User.username == username).first()
        if user:
            return user

        user = User(
            username=username,
            email=email.lower(),
            password_hash=get_password_hash(password),
            full_name=full_name,
            role=UserRole.ADMIN,
        )
        self.db.add(user)
        self._commit(f"create bootstrap admin {username}")
        self.db.refresh(user)

        logger.info(f"Created bootstrap admin {username} (id={user.id})")
        return user

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to {action}")
            raise ServerError()
