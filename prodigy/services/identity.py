"""
Identity store: registration, authentication and profile management.
"""
import logging
import secrets
import string
from typing import Any, Dict, Optional

from email_validator import validate_email, EmailNotValidError
from sqlmodel import Session, select

from prodigy.core.config import settings
from prodigy.core.errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from prodigy.core.security import create_access_token, get_password_hash, verify_password
from prodigy.models.common import now_iso
from prodigy.models.user import User

logger = logging.getLogger(__name__)

_REGISTER_ID_ALPHABET = string.ascii_uppercase + string.digits
_REQUIRED_PROFILE_FIELDS = ("first_name", "last_name", "email")
_PROFILE_FIELDS = ("first_name", "last_name", "email", "phone", "bio", "social_accounts")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_register_id() -> str:
    suffix = "".join(
        secrets.choice(_REGISTER_ID_ALPHABET) for _ in range(settings.REGISTER_ID_LENGTH)
    )
    return f"{settings.REGISTER_ID_PREFIX}{suffix}"


def _unique_register_id(db: Session) -> str:
    while True:
        code = generate_register_id()
        if get_by_register_id(db, code) is None:
            return code


def get_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.exec(select(User).where(User.email == normalize_email(email))).first()


def get_by_register_id(db: Session, code: str) -> Optional[User]:
    return db.exec(select(User).where(User.register_id == code)).first()


def require_user(db: Session, user_id: str) -> User:
    user = get_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def register(db: Session, first_name: str, last_name: str, email: str, password: str) -> User:
    """
    Create a new identity and return it.

    The password is stored as a bcrypt hash and a unique register id is issued.

    Raises:
        DuplicateEmail: If the email is already registered
    """
    if get_by_email(db, email):
        raise DuplicateEmail("User already exists")

    user = User(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=normalize_email(email),
        password=get_password_hash(password),
        register_id=_unique_register_id(db),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.register_id)
    return user


def authenticate(db: Session, email: str, password: str) -> str:
    """
    Check credentials and issue a session token bound to the identity id.

    Raises:
        NotFound: If no identity has this email
        InvalidCredentials: If the password does not match
    """
    user = get_by_email(db, email)
    if not user:
        raise NotFound("User not found")
    if not verify_password(password, user.password):
        raise InvalidCredentials("Invalid credentials")
    return create_access_token(subject=user.id)


def _validated_email(email: str) -> str:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Invalid email format")
    return normalize_email(email)


def update_profile(db: Session, user_id: str, fields: Dict[str, Any]) -> User:
    """
    Replace the editable profile fields of an identity.

    First name, last name and email must be present and non-empty.

    Raises:
        NotFound: If the identity does not exist
        ValidationError: If a required field is missing or the email is malformed
        DuplicateEmail: If the email belongs to another identity
    """
    user = require_user(db, user_id)

    for name in _REQUIRED_PROFILE_FIELDS:
        value = fields.get(name)
        if not value or not str(value).strip():
            raise ValidationError("First name, last name, and email are required")

    email = _validated_email(fields["email"])
    if email != user.email:
        other = get_by_email(db, email)
        if other and other.id != user.id:
            raise DuplicateEmail("Email already in use")

    for name in _PROFILE_FIELDS:
        if name in fields:
            setattr(user, name, fields[name])
    user.first_name = user.first_name.strip()
    user.last_name = user.last_name.strip()
    user.email = email
    user.updated_at = now_iso()

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user.id)
    return user


def set_avatar(db: Session, user_id: str, avatar_url: str) -> User:
    user = require_user(db, user_id)
    user.avatar = avatar_url
    user.updated_at = now_iso()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def list_users(db: Session):
    return db.exec(select(User).order_by(User.created_at)).all()
