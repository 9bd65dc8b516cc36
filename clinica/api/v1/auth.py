from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import (
    get_current_user, get_current_user_token, rate_limit_check
)
from ...core.security import TokenPayload
from ...services.auth_service import AuthService
from ...schemas.auth import (
    UserLogin, UserRegister, LoginResponse, PasswordReset, ChangePassword,
    MessageResponse, CreatedResponse, TokenInfo
)
from ...models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Register a new patient account."""
    user = AuthService(db).register_user(user_data)
    return CreatedResponse(msg="Usuario creado con éxito", id=user.id)

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate with username or email and return an access token."""
    return AuthService(db).authenticate_user(login_data)

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    reset_data: PasswordReset,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Set a new password for a username."""
    AuthService(db).reset_password(reset_data)
    return MessageResponse(msg="Contraseña actualizada con éxito")

@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: ChangePassword,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the caller's password."""
    AuthService(db).change_password(current_user, password_data)
    return MessageResponse(msg="Contraseña cambiada con éxito")

@router.post("/verify-token", response_model=TokenInfo)
async def verify_token_endpoint(
    token_payload: TokenPayload = Depends(get_current_user_token),
    current_user: User = Depends(get_current_user)
):
    """Verify if token is valid, reporting the role currently stored for its user."""
    return TokenInfo(id=current_user.id, role=current_user.role, exp=token_payload.exp)
