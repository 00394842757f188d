"""JWT 토큰 검증 유틸리티 모듈.

JWT token verification utility module.
Access tokens are issued by the hosted authentication service; this service
only verifies them. ``create_access_token`` exists for local seeding and tests.

JWT Payload Structure:
    {
        "sub": "profile_uuid",      # 프로필 ID (Profile identifier)
        "role": "authenticated",    # 호스팅 인증 역할 (Hosted auth role, not the app role)
        "aud": "authenticated",     # 선택 (Optional audience)
        "exp": 1234567890           # 만료 시간 UNIX timestamp (Expiration)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from talentops.config import settings


def create_access_token(data: dict[str, Any], expires_minutes: int = 60) -> str:
    """JWT 액세스 토큰을 생성합니다 (개발/테스트용).

    Generate a JWT access token signed with the configured secret.
    Used by the seed script and the test-suite only.

    Args:
        data: JWT 페이로드 데이터, 최소 {"sub": profile_id} (Payload, at least the subject)
        expires_minutes: 만료 시간(분) (Token TTL in minutes)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    if settings.JWT_AUDIENCE:
        to_encode.setdefault("aud", settings.JWT_AUDIENCE)
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    if settings.JWT_AUDIENCE:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"verify_aud": False},
    )
