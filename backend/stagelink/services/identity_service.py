"""
StageLink Backend — Identity Service
======================================

What:  Accounts, password hashing and bearer sessions.
Why:   Every other service keys its authorization on the profile id, and the
       profile id IS the account id. This service is the only writer of
       `accounts`, `revoked_sessions` and of new `user_profiles` rows.
How:   bcrypt for password hashes, python-jose HS256 JWTs for sessions.

Session token claims:
    sub  account id (UUID string)
    jti  random id; sign-out stores it in revoked_sessions
    iat  issued at
    exp  expiry (settings.session_expire_minutes after iat)

Sign-up flow (single transaction, committed by get_db_session):
    ┌──────────────┐    ┌────────────────────┐    ┌─────────────┐
    │ INSERT       │───▶│ INSERT             │───▶│ issue token │
    │ accounts     │    │ user_profiles      │    │ (no write)  │
    └──────────────┘    └────────────────────┘    └─────────────┘
    A duplicate email trips the accounts unique constraint → 409.
"""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.config import settings
from stagelink.database import flush_or_conflict
from stagelink.exceptions import AuthenticationError, ValidationError
from stagelink.models import Account, Profile, RevokedSession
from stagelink.models.enums import ProfileType
from stagelink.schemas.auth import SessionResponse

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

INVALID_CREDENTIALS = "Invalid email or password"

_ephemeral_key: Optional[str] = None


def _signing_key() -> str:
    """
    The configured JWT secret, or a per-process random key when none is set.

    The fallback keeps local development working; sessions signed with it
    die with the process.
    """
    global _ephemeral_key
    if settings.jwt_secret_key:
        return settings.jwt_secret_key
    if _ephemeral_key is None:
        _ephemeral_key = secrets.token_urlsafe(64)
        logger.warning(
            "JWT_SECRET_KEY not set. Generated an ephemeral signing key; "
            "sessions will not survive a restart."
        )
    return _ephemeral_key


class IdentityService:
    """
    Responsibilities:
        - create_account(): sign-up with profile provisioning
        - authenticate(): sign-in
        - sign_out(): revoke the presented session
        - resolve_session(): bearer token → account id (current identity)
    """

    # ── Passwords ─────────────────────────────────────────────────────────

    @staticmethod
    def hash_password(password: str) -> str:
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """False for a wrong password, including one no stored hash can match."""
        encoded = password.encode("utf-8")
        # Sign-up never stores a longer password, and bcrypt refuses to check one
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash could not be checked")
            return False

    @staticmethod
    def validate_password(password: str) -> None:
        if len(password) < settings.min_password_length:
            raise ValidationError(
                message=f"Password must be at least {settings.min_password_length} characters",
                field="password",
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )

    # ── Tokens ────────────────────────────────────────────────────────────

    @staticmethod
    def issue_token(account_id: uuid.UUID) -> Tuple[str, datetime]:
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=settings.session_expire_minutes)
        claims = {
            "sub": str(account_id),
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(claims, _signing_key(), algorithm=settings.jwt_algorithm)
        return token, expires_at

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            AuthenticationError: Expired, tampered or malformed token
        """
        try:
            claims = jwt.decode(token, _signing_key(), algorithms=[settings.jwt_algorithm])
        except ExpiredSignatureError:
            raise AuthenticationError(message="Session has expired. Please sign in again.")
        except JWTError:
            raise AuthenticationError(message="Invalid session token")

        if not claims.get("sub") or not claims.get("jti"):
            raise AuthenticationError(message="Invalid session token")
        return claims

    # ── Operations ────────────────────────────────────────────────────────

    async def create_account(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        profile_type: ProfileType = ProfileType.ARTIST,
        display_name: Optional[str] = None,
    ) -> SessionResponse:
        """
        Sign up: create the account and provision its profile.

        Args:
            email:        Already syntax-checked by the schema; lower-cased here
            password:     Checked against the length rules, then hashed
            profile_type: artist or venue; fixed for the life of the profile
            display_name: Defaults to the email local part when omitted

        Raises:
            ValidationError: Password too short/long, blank display name
            ConflictError:   Email already registered
        """
        email = email.strip().lower()
        self.validate_password(password)

        if display_name is None:
            display_name = email.split("@", 1)[0]
        display_name = display_name.strip()
        if not display_name:
            raise ValidationError(message="Display name is required", field="display_name")

        account = Account(email=email, password_hash=self.hash_password(password))
        db.add(account)
        await flush_or_conflict(
            db,
            message="An account with this email already exists",
            constraint="accounts_email_key",
        )

        profile = Profile(
            id=account.id,
            email=email,
            profile_type=ProfileType(profile_type).value,
            display_name=display_name,
            social_links={},
        )
        db.add(profile)
        await db.flush()

        token, expires_at = self.issue_token(account.id)
        logger.info("Account created: %s (%s)", account.id, profile.profile_type)
        return SessionResponse(account_id=account.id, access_token=token, expires_at=expires_at)

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> SessionResponse:
        """
        Sign in. The error never says whether the email or the password was wrong.
        """
        account = await db.scalar(
            select(Account).where(Account.email == email.strip().lower())
        )
        if account is None or not self.verify_password(password, account.password_hash):
            logger.info("Failed sign-in for %s", email)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        token, expires_at = self.issue_token(account.id)
        return SessionResponse(account_id=account.id, access_token=token, expires_at=expires_at)

    async def sign_out(self, db: AsyncSession, claims: Dict[str, Any]) -> None:
        """Record the token's jti so resolve_session rejects it from now on."""
        if await self._is_revoked(db, claims["jti"]):
            return
        db.add(
            RevokedSession(
                jti=claims["jti"],
                account_id=uuid.UUID(claims["sub"]),
                expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            )
        )
        await flush_or_conflict(
            db,
            message="Session already signed out",
            constraint="ix_revoked_sessions_jti",
        )
        logger.info("Session %s revoked for %s", claims["jti"], claims["sub"])

    async def resolve_session(self, db: AsyncSession, token: str) -> Tuple[uuid.UUID, Dict[str, Any]]:
        """
        Bearer token → (account id, claims).

        Raises:
            AuthenticationError: Invalid, expired or revoked token
        """
        claims = self.decode_token(token)
        if await self._is_revoked(db, claims["jti"]):
            raise AuthenticationError(message="Session has been signed out")
        try:
            account_id = uuid.UUID(claims["sub"])
        except ValueError:
            raise AuthenticationError(message="Invalid session token")
        return account_id, claims

    @staticmethod
    async def _is_revoked(db: AsyncSession, jti: str) -> bool:
        return bool(await db.scalar(select(exists().where(RevokedSession.jti == jti))))


# ── Singleton Instance ────────────────────────────────────────────────────
identity_service = IdentityService()
