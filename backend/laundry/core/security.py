import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from laundry.core.config import MIN_SECRET_LENGTH, is_weak_secret

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24
ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its stored hash.

    Args:
        plain_password: Plain text password sent at login
        hashed_password: Stored hash; None or an unrecognised format never matches

    Returns:
        True if the password matches, False otherwise
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def get_jwt_secret_key() -> str:
    """Get the JWT signing secret.

    Returns:
        JWT_SECRET_KEY from the environment, or the development default

    Raises:
        ValueError: In production (FLASK_ENV=production) when the secret is a
            known default or shorter than MIN_SECRET_LENGTH
    """
    secret = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    if os.getenv("FLASK_ENV") == "production" and is_weak_secret(secret):
        raise ValueError(
            f"Production deployment requires strong JWT_SECRET_KEY "
            f"(min {MIN_SECRET_LENGTH} chars). Set JWT_SECRET_KEY environment variable."
        )

    return secret


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed JWT carrying the given claims.

    Args:
        data: Claims to encode; "exp" is added
        expires_delta: Lifetime of the token (default JWT_EXPIRATION_HOURS)

    Returns:
        Encoded JWT string
    """
    lifetime = expires_delta or timedelta(hours=JWT_EXPIRATION_HOURS)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, get_jwt_secret_key(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate a JWT.

    Args:
        token: Encoded JWT from the Authorization header or the cookie

    Returns:
        Claims if the signature is valid and "exp" and "sub" are present and
        current, None otherwise
    """
    try:
        return jwt.decode(
            token,
            get_jwt_secret_key(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError:
        return None


def create_user_token(user_id: str, user_type: str) -> str:
    """Create an access token for a user.

    Args:
        user_id: User's login id, stored as "sub"
        user_type: customer, owner or admin

    Returns:
        Encoded JWT string
    """
    return create_access_token(
        {"sub": str(user_id), "user_type": user_type, "type": ACCESS_TOKEN_TYPE}
    )


def get_user_from_token(token: str) -> Optional[Dict[str, Any]]:
    """Read the caller's identity from an access token.

    Args:
        token: Encoded JWT

    Returns:
        {"user_id", "user_type"} for a valid access token, None otherwise
    """
    payload = decode_access_token(token)
    if payload is None or not payload["sub"] or payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    return {"user_id": str(payload["sub"]), "user_type": payload.get("user_type")}
