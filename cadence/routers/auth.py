"""
Dashboard session router.

POST /auth/login
POST /auth/logout
"""
from fastapi import APIRouter, Response
from pydantic import BaseModel

from cadence.core.auth import SESSION_COOKIE, SESSION_MAX_AGE, check_password, session_token
from cadence.core.config import settings
from cadence.core.errors import UnauthorizedError
from cadence.schemas.common import OkResponse

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    password: str


@router.post(
    "/login",
    response_model=OkResponse,
    summary="Exchange the dashboard password for a session cookie",
    responses={401: {"description": "Wrong password."}},
)
def login(payload: LoginRequest, response: Response):
    if not check_password(payload.password):
        raise UnauthorizedError("Incorrect password.")
    response.set_cookie(
        SESSION_COOKIE,
        session_token(),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=settings.APP_ENV == "production",
        samesite="lax",
        path="/",
    )
    return OkResponse()


@router.post("/logout", response_model=OkResponse, summary="Clear the session cookie")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE, path="/")
    return OkResponse()
