from pydantic import EmailStr, Field
from typing import Dict, List, Optional

from prodigy.schemas.base import CamelModel


class SocialAccounts(CamelModel):
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None


# Properties to receive via API on registration
class UserRegister(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


class UserLogin(CamelModel):
    email: str
    password: str


# Properties to receive via API on profile update.
# Required-field and email checks happen in the identity service.
class UserUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    social_accounts: Optional[SocialAccounts] = None


# Profile fields safe to show to any user
class UserPublic(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    register_id: str
    avatar: Optional[str] = None


# Full profile returned to its owner
class UserRead(UserPublic):
    phone: Optional[str] = None
    bio: Optional[str] = None
    social_accounts: Optional[Dict[str, Optional[str]]] = None
    created_at: Optional[str] = None


class UserSearchResult(CamelModel):
    id: str
    register_id: str
    full_name: str
    email: str
    avatar: Optional[str] = None


class RegisterResponse(CamelModel):
    message: str
    register_id: str


class LoginResponse(CamelModel):
    message: str
    register_id: str
    user: UserPublic
    access_token: str
    token_type: str = "bearer"


class AvatarResponse(CamelModel):
    message: str
    avatar_url: str
    user: UserRead
