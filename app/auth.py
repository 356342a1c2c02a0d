import hashlib
import secrets
from datetime import datetime, timezone

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.infrastructure.db.models import User, AccessToken

# pbkdf2_sha256: primary (no native deps)
# bcrypt: accepted for hashes imported from older deployments
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])

TOKEN_NAME = "auth_token"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_access_token(db: Session, user: User, name: str = TOKEN_NAME) -> str:
    """
    Create a bearer token for the user (flush only, the caller commits).

    The plain token is returned once; only its digest is stored.
    """
    plain = secrets.token_urlsafe(40)
    db.add(AccessToken(user_id=user.id, name=name, token_hash=hash_token(plain)))
    db.flush()
    return plain


def find_access_token(db: Session, token: str) -> AccessToken | None:
    """Stored token for a presented bearer value, marking it as used"""
    access_token = db.query(AccessToken).filter(AccessToken.token_hash == hash_token(token)).first()
    if access_token is not None:
        access_token.last_used_at = datetime.now(timezone.utc)
        db.commit()
    return access_token


def revoke_access_token(db: Session, access_token: AccessToken) -> None:
    db.delete(access_token)
    db.flush()
