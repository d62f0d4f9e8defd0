"""Authentication service for password login and JWT issuance."""

from datetime import UTC, datetime, timedelta

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healx.config import settings
from healx.core.exceptions import (
    ConflictException,
    ForbiddenException,
    RateLimitException,
    UnauthorizedException,
)
from healx.core.identifiers import generate_employee_id, generate_patient_id
from healx.core.redis_client import CacheManager, RateLimiter
from healx.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from healx.models.patients import patients
from healx.models.staff import staff
from healx.schemas.auth import (
    PATIENT_ROLE,
    ROLE_DEPARTMENTS,
    LoginRequest,
    PatientRegister,
    StaffCreate,
    StaffRole,
    Token,
)

logger = structlog.get_logger()


class AuthService:
    """Registration, login and token lifecycle for patients and staff."""

    REVOKED_PREFIX = "revoked:refresh:"

    def __init__(
        self,
        db: AsyncSession,
        cache_manager: CacheManager | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        """Initialize service with database session and Redis helpers."""
        self.db = db
        self.cache = cache_manager
        self.rate_limiter = rate_limiter

    def _check_rate_limit(self, scope: str, email: str) -> None:
        if self.rate_limiter is None:
            return
        key = f"login:{scope}:{email}"
        if not self.rate_limiter.check_rate_limit(key, settings.rate_limit_per_minute, 60):
            logger.warning("login_rate_limited", scope=scope, email=email)
            raise RateLimitException("Too many login attempts, try again later")

    @staticmethod
    def create_tokens(subject: str, role: str) -> Token:
        """
        Create access and refresh tokens for a principal.

        Args:
            subject: Patient or staff id
            role: Role claim carried by both tokens

        Returns:
            Token pair (access and refresh)
        """
        claims = {"sub": subject, "role": role}
        return Token(
            access_token=create_access_token(
                claims,
                expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
            ),
            refresh_token=create_refresh_token(
                claims,
                expires_delta=timedelta(days=settings.refresh_token_expire_days),
            ),
        )

    async def register_patient(self, data: PatientRegister) -> tuple[dict, Token]:
        """
        Register a patient account and sign it in.

        Raises:
            ConflictException: If the email is already registered
        """
        stmt = (
            patients.insert()
            .values(
                patient_code=generate_patient_id(),
                name=data.name,
                email=data.email,
                phone=data.phone,
                age=data.age,
                gender=data.gender.value if data.gender else None,
                address=data.address,
                medical_history=data.medical_history,
                allergies=data.allergies,
                password_hash=get_password_hash(data.password),
                role=PATIENT_ROLE,
            )
            .returning(patients)
        )
        try:
            result = await self.db.execute(stmt)
            patient = dict(result.mappings().one())
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Email already registered")

        logger.info("patient_registered", patient_id=str(patient["id"]))
        return patient, self.create_tokens(str(patient["id"]), PATIENT_ROLE)

    async def login_patient(self, credentials: LoginRequest) -> tuple[dict, Token]:
        """
        Authenticate a patient by email and password.

        Raises:
            UnauthorizedException: On unknown email or wrong password
            ForbiddenException: If the account is deactivated
            RateLimitException: After too many attempts for the email
        """
        self._check_rate_limit("patient", credentials.email)

        result = await self.db.execute(
            select(patients).where(patients.c.email == credentials.email)
        )
        patient = result.mappings().first()
        if patient is None:
            raise UnauthorizedException("Invalid email or password")
        if not verify_password(credentials.password, patient["password_hash"]):
            logger.info("login_failed", scope="patient", email=credentials.email)
            raise UnauthorizedException("Invalid email or password")
        if not patient["is_active"]:
            raise ForbiddenException("Account is deactivated")

        await self.db.execute(
            update(patients).where(patients.c.id == patient["id"]).values(last_login_at=func.now())
        )
        await self.db.commit()
        patient = dict(patient) | {"last_login_at": datetime.now(UTC)}

        logger.info("patient_logged_in", patient_id=str(patient["id"]))
        return patient, self.create_tokens(str(patient["id"]), patient["role"])

    async def login_staff(self, credentials: LoginRequest) -> tuple[dict, Token]:
        """
        Authenticate a staff member (admin login).

        Raises:
            UnauthorizedException: On unknown email or wrong password
            ForbiddenException: If the account is deactivated
            RateLimitException: After too many attempts for the email
        """
        self._check_rate_limit("staff", credentials.email)

        result = await self.db.execute(select(staff).where(staff.c.email == credentials.email))
        member = result.mappings().first()
        if member is None:
            raise UnauthorizedException("Invalid email or password")
        if not verify_password(credentials.password, member["password_hash"]):
            logger.info("login_failed", scope="staff", email=credentials.email)
            raise UnauthorizedException("Invalid email or password")
        if not member["is_active"]:
            raise ForbiddenException("Account is deactivated")

        await self.db.execute(
            update(staff).where(staff.c.id == member["id"]).values(last_login_at=func.now())
        )
        await self.db.commit()
        member = dict(member) | {"last_login_at": datetime.now(UTC)}

        logger.info("staff_logged_in", staff_id=str(member["id"]), role=member["role"])
        return member, self.create_tokens(str(member["id"]), member["role"])

    async def create_staff(self, data: StaffCreate) -> dict:
        """
        Create a staff account; the department follows from the role.

        Raises:
            ConflictException: If the email is already in use
        """
        stmt = (
            staff.insert()
            .values(
                employee_id=generate_employee_id(data.role.value),
                name=data.name,
                email=data.email,
                password_hash=get_password_hash(data.password),
                role=data.role.value,
                department=ROLE_DEPARTMENTS[StaffRole(data.role)],
                specialization=data.specialization,
            )
            .returning(staff)
        )
        try:
            result = await self.db.execute(stmt)
            member = dict(result.mappings().one())
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Email already in use")

        logger.info("staff_created", staff_id=str(member["id"]), role=member["role"])
        return member

    def _is_revoked(self, refresh_token: str) -> bool:
        return bool(self.cache and self.cache.exists(f"{self.REVOKED_PREFIX}{refresh_token}"))

    def refresh_access_token(self, refresh_token: str) -> Token:
        """
        Issue a new token pair from a valid refresh token.

        Raises:
            UnauthorizedException: If the token is invalid or revoked
        """
        payload = decode_refresh_token(refresh_token)
        if payload is None or self._is_revoked(refresh_token):
            raise UnauthorizedException("Invalid refresh token")

        subject = payload.get("sub")
        role = payload.get("role")
        if not isinstance(subject, str) or not isinstance(role, str):
            raise UnauthorizedException("Invalid token payload")

        return self.create_tokens(subject, role)

    def logout(self, refresh_token: str) -> None:
        """
        Revoke a refresh token until it would have expired anyway.

        Raises:
            UnauthorizedException: If the token is not a valid refresh token
        """
        payload = decode_refresh_token(refresh_token)
        if payload is None:
            raise UnauthorizedException("Invalid refresh token")

        ttl = int(payload["exp"] - datetime.now(UTC).timestamp())
        if self.cache and ttl > 0:
            self.cache.set(f"{self.REVOKED_PREFIX}{refresh_token}", "1", ttl=ttl)
        logger.info("logged_out", subject=payload.get("sub"))
