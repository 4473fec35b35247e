"""
数据库模型定义
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

from ..core.engines.base import EngineCategory

Base = declarative_base()


class TenantEngine(Base):
    """租户引擎表 - 每个租户每个引擎一行"""

    __tablename__ = "engines"
    __table_args__ = (
        UniqueConstraint("company_id", "key", name="uq_engines_company_key"),
        Index("idx_engines_company_sort", "company_id", "sort_order"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), nullable=False, index=True)
    key = Column(String(64), nullable=False)

    # 展示信息
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(64), nullable=False, default="Package")
    category = Column(
        Enum(
            EngineCategory,
            name="enginecategory",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )

    # 状态
    is_core = Column(Boolean, nullable=False, default=False)
    is_installed = Column(Boolean, nullable=False, default=False)
    is_enabled = Column(Boolean, nullable=False, default=False)

    # 依赖的其他引擎 key 列表（同租户）
    depends_on = Column(JSON, nullable=False, default=list)

    # 前端导航
    workspace_route = Column(String(200), nullable=True)
    settings_route = Column(String(200), nullable=True)

    sort_order = Column(Integer, nullable=False, default=100)
    version = Column(String(32), nullable=False, default="1.0.0")

    # 乐观锁版本号，每次状态写入 +1
    revision = Column(Integer, nullable=False, default=1)

    # 时间戳
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class OnboardingStatus(Base):
    """租户开通引导状态"""

    __tablename__ = "onboarding_status"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), nullable=False, unique=True, index=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    modules_selected = Column(JSON, nullable=False, default=list)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
