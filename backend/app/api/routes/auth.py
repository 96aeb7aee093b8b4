# api/routes/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from app.core.config import settings
from app.core.deps import get_current_admin
from app.core.security import create_access_token, verify_admin_credentials
from app.schemas import LoginRequest, LoginResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(login_data: LoginRequest, response: Response):
    if not verify_admin_credentials(login_data.email, login_data.password):
        logger.info(f"Rejected login for {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password. Please check your credentials and try again."
        )

    access_token = create_access_token(
        data={
            "sub": settings.ADMIN_EMAIL,
            "role": "admin",
        }
    )

    # Set HttpOnly cookie
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/"
    )

    logger.info(f"✅ Admin {settings.ADMIN_EMAIL} logged in")
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": {
            "email": settings.ADMIN_EMAIL,
            "name": "Admin",
            "is_admin": True
        }
    }


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie("access_token", path="/")
    return {"status": "success"}


@router.get("/me")
def get_current_user_info(admin: dict = Depends(get_current_admin)):
    """Get current authenticated user info"""
    return {
        "email": admin["username"],
        "name": "Admin",
        "is_admin": True,
        "source": "environment"
    }
