"""
api/routes/auth.py -- Registration, login, logout and session introspection.

Routes:
  POST /api/register  -- create an account
  POST /api/login     -- verify credentials; bind identity to the session
  POST /api/logout    -- purge the session; always 200
  GET  /api/session   -- bound identity, or both fields null

Security:
  Login answers an unknown username and a wrong password with the same 401
  "bad_credentials" error (AuthService raises InvalidCredentials for both).
  Cache-Control: no-store on login responses.
  Errors raised here are DiaryError subclasses; api/main.py maps them to
  status codes, so handlers contain no status-code branching.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import Credentials, MessageResponse, SessionResponse
from auth.dependencies import get_identity
from auth.models import Identity
from auth.service import AuthService
from auth.session import bind, purge

logger = logging.getLogger("selfdiary.api")

# Auth policy:
# - POST /api/register: public
# - POST /api/login:    public
# - POST /api/logout:   public -- purging an empty session is a no-op
# - GET  /api/session:  public -- anonymous callers get null identity
router = APIRouter()


@router.post("/register", response_model=MessageResponse)
def register(request: Request, body: Credentials) -> MessageResponse:
    """Validate and store a new user. Does not log the user in."""
    service: AuthService = request.app.state.auth_service
    service.register(body.username, body.password)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=MessageResponse)
def login(request: Request, body: Credentials) -> JSONResponse:
    """Authenticate with username and password and bind the identity to the session."""
    service: AuthService = request.app.state.auth_service
    identity = service.login(body.username, body.password)
    bind(request.session, identity.user_id, identity.username)
    logger.info("User id=%d logged in", identity.user_id)

    resp = JSONResponse(content=MessageResponse(message="Login successful").model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> MessageResponse:
    """Clear the session. Succeeds whether or not anyone was logged in."""
    purge(request.session)
    return MessageResponse(message="Logged out successfully")


@router.get("/session", response_model=SessionResponse)
def get_session(identity: Identity | None = Depends(get_identity)) -> SessionResponse:
    """Return the bound identity, or user_id=null and username=null together."""
    if identity is None:
        return SessionResponse()
    return SessionResponse(user_id=identity.user_id, username=identity.username)
