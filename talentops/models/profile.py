"""사용자 프로필 SQLAlchemy ORM 모델 정의.

Profile SQLAlchemy ORM model definition.
Accounts live in the hosted authentication service; a profile row carries
the application role used for every permission check.

Tables:
    - profiles: 사용자 프로필 (User profiles keyed by the auth user id)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentops.database import Base

# 애플리케이션 역할 — Application roles
PROFILE_ROLES: tuple[str, ...] = ("admin", "in_house", "supervisor", "coordinator", "talent_escort")


class Profile(Base):
    """프로필 모델 — 인증 사용자와 1:1.

    Profile model — One row per authenticated user.

    Attributes:
        id: 인증 사용자 UUID (Auth user identifier, also the JWT subject)
        full_name: 이름 (Display name)
        email: 이메일 (Email address, unique)
        role: 역할 (admin, in_house, supervisor, coordinator, talent_escort)
        is_active: 활성 상태 (Whether the profile may sign in)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "profiles"

    # 프로필 고유 식별자 — Equals the hosted auth user id
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 표시 이름 — Display name
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    # 이메일 — Unique email address
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 역할 — Application role
    role: Mapped[str] = mapped_column(String(30), nullable=False, default="talent_escort")
    # 활성 상태 — Inactive profiles are rejected at authentication
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'in_house', 'supervisor', 'coordinator', 'talent_escort')",
            name="ck_profiles_role",
        ),
    )
