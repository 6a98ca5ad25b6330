import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import bcrypt
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.revoked_token import RevokedToken
from app.models.user import User

logger = logging.getLogger(__name__)


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass
class CurrentUser:
    id: str
    email: Optional[str]
    is_admin: bool
    jti: Optional[str] = None
    expires_at: Optional[datetime] = None


# ============================================================
# PASSWORD HELPERS
# ============================================================

def hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed.encode())


# ============================================================
# ACCOUNTS
# ============================================================

def create_user(db: Session, email: str, password: str, is_admin: bool = False) -> User:
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise ValueError("Email already exists")

    user = User(
        id=str(uuid4()),
        email=email,
        hashed_password=hash_password(password),
        is_admin=is_admin,
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def ensure_admin(db: Session, email: str, password: str) -> User:
    """Create the bootstrap admin, or promote the account if it exists."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.info("Creating bootstrap admin %s", email)
        return create_user(db, email, password, is_admin=True)

    if not user.is_admin:
        user.is_admin = True
        db.commit()
        db.refresh(user)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# ============================================================
# TOKENS
# ============================================================

def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "jti": uuid4().hex})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def revoke_token(db: Session, user: CurrentUser) -> None:
    if not user.jti:
        return
    if db.query(RevokedToken).filter(RevokedToken.jti == user.jti).first():
        return

    db.add(
        RevokedToken(
            jti=user.jti,
            user_id=user.id,
            expires_at=user.expires_at or datetime.utcnow(),
        )
    )
    db.commit()


def _decode_local(token: str, db: Session) -> CurrentUser:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    jti = payload.get("jti")
    if jti and db.query(RevokedToken).filter(RevokedToken.jti == jti).first():
        raise HTTPException(status_code=401, detail="Token has been revoked")

    user = db.query(User).filter(User.id == user_id).first()

    # If DB was wiped, token is invalid → return 401 instead of crashing
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")

    exp = payload.get("exp")
    return CurrentUser(
        id=user.id,
        email=user.email,
        is_admin=bool(user.is_admin),
        jti=jti,
        expires_at=datetime.utcfromtimestamp(exp) if exp else None,
    )


def _decode_supabase(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    email = payload.get("email")
    return CurrentUser(
        id=payload.get("sub"),
        email=email,
        is_admin=bool(email) and email.lower() in {e.lower() for e in settings.ADMIN_EMAILS},
    )


# ============================================================
# DEPENDENCIES
# ============================================================

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if settings.AUTH_BACKEND == "supabase":
        return _decode_supabase(token)
    return _decode_local(token, db)


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
