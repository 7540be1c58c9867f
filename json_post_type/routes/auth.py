from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from json_post_type.auth import ACCESS_TOKEN_COOKIE, create_access_token
from json_post_type.config import settings
from json_post_type.database import get_db
from json_post_type.exceptions import AuthenticationError
from json_post_type.schemas import Token
from json_post_type.services.auth_service import authenticate_user
from json_post_type.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """
    Endpoint to generate an access token; `username` carries the email.
    """
    user = await authenticate_user(form_data.username, form_data.password, db)
    if not user:
        raise AuthenticationError("Invalid email or password")

    access_token = create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    logger.info(f"Access token created for user: {user.email}")
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/login")
async def get_login(request: Request):
    return templates.TemplateResponse(request, "login.html", {"app_name": settings.app_name})


@router.post("/login")
async def post_login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db),
):
    user = await authenticate_user(email, password, db)
    if not user:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"app_name": settings.app_name, "error": "Invalid credentials"},
            status_code=401,
        )

    access_token = create_access_token({"sub": user.email})
    response = RedirectResponse("/admin/json", status_code=303)
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return response


@router.get("/logout")
async def logout():
    response = RedirectResponse(url="/login", status_code=303)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response
