"""Authentication endpoints."""

from fastapi import APIRouter, status

from healx.dependencies import AdminPrincipal, Cache, DatabaseSession, Limiter
from healx.schemas.auth import (
    LoginRequest,
    PatientLoginResponse,
    PatientRegister,
    PatientResponse,
    StaffCreate,
    StaffLoginResponse,
    StaffResponse,
    Token,
    TokenRefresh,
)
from healx.schemas.common import Envelope
from healx.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=Envelope[PatientLoginResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a patient account",
)
async def register(
    data: PatientRegister,
    db: DatabaseSession,
    cache: Cache,
) -> Envelope[PatientLoginResponse]:
    """
    Register a patient and return a token pair.

    Args:
        data: Registration details
        db: Database session
        cache: Redis cache manager

    Returns:
        Tokens and the new patient profile
    """
    patient, tokens = await AuthService(db, cache).register_patient(data)
    return Envelope(
        message="Registration successful",
        data=PatientLoginResponse(
            **tokens.model_dump(),
            user=PatientResponse.model_validate(patient),
        ),
    )


@router.post(
    "/login",
    response_model=Envelope[PatientLoginResponse],
    status_code=status.HTTP_200_OK,
    summary="Patient login",
)
async def login(
    credentials: LoginRequest,
    db: DatabaseSession,
    cache: Cache,
    limiter: Limiter,
) -> Envelope[PatientLoginResponse]:
    """
    Authenticate a patient with email and password.

    Args:
        credentials: Email and password
        db: Database session
        cache: Redis cache manager
        limiter: Login rate limiter

    Returns:
        Tokens and the patient profile
    """
    patient, tokens = await AuthService(db, cache, limiter).login_patient(credentials)
    return Envelope(
        message="Login successful",
        data=PatientLoginResponse(
            **tokens.model_dump(),
            user=PatientResponse.model_validate(patient),
        ),
    )


@router.post(
    "/admin-login",
    response_model=Envelope[StaffLoginResponse],
    status_code=status.HTTP_200_OK,
    summary="Staff login",
)
async def admin_login(
    credentials: LoginRequest,
    db: DatabaseSession,
    cache: Cache,
    limiter: Limiter,
) -> Envelope[StaffLoginResponse]:
    """
    Authenticate a staff member (admin, receptionist, doctor, financial manager).

    Args:
        credentials: Email and password
        db: Database session
        cache: Redis cache manager
        limiter: Login rate limiter

    Returns:
        Tokens and the staff profile
    """
    member, tokens = await AuthService(db, cache, limiter).login_staff(credentials)
    return Envelope(
        message="Login successful",
        data=StaffLoginResponse(
            **tokens.model_dump(),
            user=StaffResponse.model_validate(member),
        ),
    )


@router.post(
    "/refresh",
    response_model=Envelope[Token],
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
)
async def refresh_token(data: TokenRefresh, db: DatabaseSession, cache: Cache) -> Envelope[Token]:
    """
    Exchange a valid, unrevoked refresh token for a new token pair.

    Raises:
        UnauthorizedException: If the refresh token is invalid or revoked
    """
    return Envelope(data=AuthService(db, cache).refresh_access_token(data.refresh_token))


@router.post(
    "/logout",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Revoke a refresh token",
)
async def logout(data: TokenRefresh, db: DatabaseSession, cache: Cache) -> Envelope[None]:
    """Revoke the given refresh token."""
    AuthService(db, cache).logout(data.refresh_token)
    return Envelope(message="Logged out")


@router.post(
    "/staff",
    response_model=Envelope[StaffResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a staff account",
)
async def create_staff(
    data: StaffCreate,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[StaffResponse]:
    """Create a staff account. Admin only."""
    member = await AuthService(db).create_staff(data)
    return Envelope(message="Staff account created", data=StaffResponse.model_validate(member))
