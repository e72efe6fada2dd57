"""
api/routes/auth.py -- Account endpoints.

Routes:
  POST /api/auth/createuser  -- register; returns a token
  POST /api/auth/login       -- password login; returns a token
  POST /api/auth/getuser     -- current user's record (requires auth)

Security:
  Login failures use one generic error for unknown email and wrong password
  (AuthService.login handles timing equalization -- do not inline the
  lookup + verify here).
  Token responses carry Cache-Control: no-store.
  getuser never serializes the password hash (UserOut has no such field).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import CreateUserRequest, LoginRequest, UserOut
from api.responses import success
from auth.dependencies import get_current_user_id
from auth.service import AuthService

# Auth policy:
# - POST /api/auth/createuser: public -- registration
# - POST /api/auth/login:      public -- login endpoint must be unauthenticated
# - POST /api/auth/getuser:    requires auth (get_current_user_id)
router = APIRouter(prefix="/api/auth")


def _token_response(token: str) -> JSONResponse:
    resp = success({"token": token})
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/createuser")
def create_user(request: Request, body: CreateUserRequest) -> JSONResponse:
    """Register a new account and return a token for it."""
    service: AuthService = request.app.state.auth_service
    token = service.register(body.name, body.email, body.password)
    return _token_response(token)


@router.post("/login")
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password and return a fresh token.

    Returns the same generic error for an unknown email and a wrong
    password to avoid leaking which addresses are registered.
    """
    service: AuthService = request.app.state.auth_service
    token = service.login(body.email, body.password)
    return _token_response(token)


@router.post("/getuser")
def get_user(request: Request, user_id: str = Depends(get_current_user_id)) -> JSONResponse:
    """Return the authenticated user's record, without the password hash."""
    service: AuthService = request.app.state.auth_service
    user = service.get_user(user_id)
    return success({"user": UserOut.from_user(user).model_dump()})
