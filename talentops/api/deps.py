"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends the hosted auth service's access token)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies the JWT and returns the payload)
    3. 페이로드의 "sub" 필드로 프로필을 조회하고 활성 상태를 확인
       (The profile is loaded from "sub" and must be active)

Authorization:
    require_roles(*roles)는 프로필 역할이 목록에 없으면 403을 반환합니다
    (require_roles(*roles) returns 403 unless the profile role is listed)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.database import get_db
from talentops.models.profile import Profile
from talentops.utils.exceptions import BadRequestError, ForbiddenError, UnauthorizedError
from talentops.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — Extracts the JWT from Authorization: Bearer <token>
security: HTTPBearer = HTTPBearer()

# 배정 관리 역할 — Roles that manage daily escort assignments
MANAGER_ROLES: tuple[str, ...] = ("admin", "in_house", "supervisor", "coordinator")


async def get_current_profile(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """JWT 토큰에서 현재 인증된 프로필을 추출합니다.

    Decode the bearer token and return the authenticated, active profile.

    Raises:
        UnauthorizedError: 토큰이 유효하지 않거나 만료됨, 프로필 없음/비활성
                           (Invalid or expired token, unknown or inactive profile)
    """
    try:
        payload: dict = decode_token(credentials.credentials)
        profile_id: UUID = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid or expired token")

    profile: Profile | None = await db.get(Profile, profile_id)
    if profile is None or not profile.is_active:
        raise UnauthorizedError("User not found or inactive")
    return profile


def require_roles(*roles: str) -> Callable[..., Awaitable[Profile]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory enforcing that the current profile has one of the
    given application roles.

    Args:
        roles: 허용 역할 (Allowed roles)

    Returns:
        FastAPI 의존성 함수 — 프로필 반환 또는 403 발생
        (Dependency returning the Profile or raising 403)
    """
    allowed: frozenset[str] = frozenset(roles)

    async def _check(
        current_profile: Annotated[Profile, Depends(get_current_profile)],
    ) -> Profile:
        if current_profile.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return current_profile
    return _check


# 편의 의존성 — Pre-configured role dependencies
require_manager = require_roles(*MANAGER_ROLES)


def parse_uuid(value: str, label: str = "id") -> UUID:
    """문자열 UUID 파싱, 실패 시 400 (Parse a UUID from a request body, 400 when malformed)."""
    try:
        return UUID(value)
    except (ValueError, TypeError):
        raise BadRequestError(f"잘못된 UUID입니다 (Invalid {label})")
