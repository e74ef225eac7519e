"""
CloudNote Backend — Account Route Handlers
============================================

What:  POST /api/auth/signup, POST /api/auth/login, GET /api/auth/userdetails.
How:   Thin handlers: FastAPI validates the body, AccountService does the work,
       global exception handlers turn failures into error responses.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnote.database import get_db_session
from cloudnote.middleware.auth import require_identity
from cloudnote.schemas.auth import LoginRequest, SignupRequest, TokenResponse, UserProfile
from cloudnote.schemas.common import ErrorResponse, MessageResponse
from cloudnote.services import get_account_service
from cloudnote.services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=MessageResponse,
    responses={
        403: {"description": "Invalid input or weak password", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db_session),
    accounts: AccountService = Depends(get_account_service),
) -> MessageResponse:
    await accounts.signup(db, payload)
    return MessageResponse(message="User is created successfully.")


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"description": "Unknown email or wrong password", "model": ErrorResponse},
        403: {"description": "Invalid input", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Exchange email and password for a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    accounts: AccountService = Depends(get_account_service),
) -> TokenResponse:
    """
    The token expires one hour after issuance. Send it back as
    `Authorization: Bearer <token>` on protected routes.
    """
    return await accounts.login(db, payload.email, payload.password)


@router.get(
    "/userdetails",
    response_model=UserProfile,
    responses={
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Profile of the authenticated user",
)
async def user_details(
    identity: str = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    accounts: AccountService = Depends(get_account_service),
) -> UserProfile:
    return await accounts.get_profile(db, identity)
