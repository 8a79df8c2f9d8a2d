"""Minimal identity provider: password hashing and signed bearer tokens.

Tokens carry the user id and role. Authorization still reads the role from the
database on every request, so the claim is informational.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from chasing_cats.config import get_settings
from chasing_cats.models.enums import UserRole
from chasing_cats.models.user import User

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str, role: str) -> str:
    """Sign a bearer token for a user."""
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    claims = {"sub": str(user_id), "email": email, "role": role, "exp": expires_at}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def issue_token(user: User) -> str:
    """Sign a bearer token for a stored user."""
    return create_access_token(user.id, user.email, user.role)


def decode_access_token(token: str) -> dict | None:
    """Return the token claims, or None if the signature or expiry is invalid."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the user if the password matches."""
    user = get_user_by_email(db, email)
    if user and verify_password(password, user.password_hash):
        return user
    return None


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str | None = None,
    role: UserRole = UserRole.MEMBER,
) -> User:
    """Store a new user. New accounts are members unless a role is given."""
    user = User(
        email=email,
        password_hash=get_password_hash(password),
        name=name,
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
