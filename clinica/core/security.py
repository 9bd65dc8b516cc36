from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel, ValidationError as PydanticValidationError
from enum import Enum

from .config import settings

# Password hashing, bcrypt salts every hash on its own
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Missing credentials are reported by the access guard, not by FastAPI
security = HTTPBearer(auto_error=False)

class UserRole(str, Enum):
    USER = "user"
    DOCTOR = "doctor"
    RECEPCION = "recepcion"
    ADMIN = "admin"

class InvalidToken(Exception):
    """Raised when a token is malformed, expired, or its signature does not match."""

class TokenPayload(BaseModel):
    sub: int
    role: UserRole
    exp: Optional[int] = None
    iat: Optional[int] = None
    token_type: Optional[str] = None

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

# JWT utilities
def create_access_token(
    user_id: int,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed access token for ``user_id`` carrying its role."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": str(user_id),
        "role": UserRole(role).value,
        "iat": now,
        "exp": expire,
        "token_type": "access",
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def verify_token(token: str) -> TokenPayload:
    """Verify and decode an access token.

    Raises ``InvalidToken`` on a bad signature, an expired or malformed
    token, or a token that is not an access token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        token_payload = TokenPayload(**payload)
    except (JWTError, PydanticValidationError) as exc:
        raise InvalidToken(str(exc)) from exc

    if token_payload.token_type != "access":
        raise InvalidToken("Invalid token type")

    return token_payload
