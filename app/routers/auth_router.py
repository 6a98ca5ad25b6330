from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, field_validator
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import (
    CurrentUser,
    authenticate_user,
    create_access_token,
    get_current_user,
    revoke_token,
)


router = APIRouter(prefix="/auth", tags=["Authentication"])


# ---------- Pydantic request models ----------

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class MeResponse(BaseModel):
    id: str
    email: str | None = None
    is_admin: bool


# ------------------- LOGIN -------------------

@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=payload.email, password=payload.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    token = create_access_token({"sub": user.id})

    return {
        "access_token": token,
        "token_type": "bearer",
        "is_admin": bool(user.is_admin),
    }


# ------------------- LOGOUT -------------------

@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    revoke_token(db, current_user)
    return {"message": "Signed out"}


# ------------------- ME -------------------

@router.get("/me", response_model=MeResponse)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        is_admin=current_user.is_admin,
    )
