from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from typing import Annotated, Optional

from ..core.security import UserRole

# Surrounding whitespace is dropped before the emptiness check
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# ===== AUTH INPUTS =====
class UserRegister(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: NonEmptyStr
    password: NonEmptyStr
    full_name: NonEmptyStr = Field(alias="fullName")
    email: EmailStr

class UserLogin(BaseModel):
    # Either the username or the email address
    username: NonEmptyStr
    password: NonEmptyStr

class PasswordReset(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: NonEmptyStr
    new_password: NonEmptyStr = Field(alias="newPassword")

class ChangePassword(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: NonEmptyStr = Field(alias="currentPassword")
    new_password: NonEmptyStr = Field(alias="newPassword")

# ===== OUTPUTS =====
class MessageResponse(BaseModel):
    msg: str

class CreatedResponse(MessageResponse):
    id: int

class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    role: UserRole
    username: str
    full_name: str = Field(alias="fullName")

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    full_name: str = Field(alias="fullName")
    email: str
    role: UserRole

class TokenInfo(BaseModel):
    valid: bool = True
    id: int
    role: UserRole
    exp: Optional[int] = None
