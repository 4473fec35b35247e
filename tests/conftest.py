from __future__ import annotations

from typing import Any, Callable, Iterator, Sequence

import pytest
from sqlalchemy.orm import Session, sessionmaker

from enginehub.core.engines import EngineCategory, EngineRegistry
from enginehub.database import create_db_engine
from enginehub.models.database import Base, TenantEngine
from enginehub.services.engines import SqlAlchemyEngineCatalogStore

TENANT = "tenant-1"


@pytest.fixture
def db() -> Iterator[Session]:
    engine = create_db_engine("sqlite://", echo=False)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db: Session) -> SqlAlchemyEngineCatalogStore:
    return SqlAlchemyEngineCatalogStore(db)


@pytest.fixture
def registry(store: SqlAlchemyEngineCatalogStore) -> EngineRegistry:
    return EngineRegistry(store, strict_disable=False, conflict_retries=0)


AddEngine = Callable[..., TenantEngine]


@pytest.fixture
def add_engine(db: Session) -> AddEngine:
    """直接写入一条引擎记录，可指定任意初始状态"""

    def _add(
        key: str,
        *,
        tenant_id: str = TENANT,
        title: str | None = None,
        category: EngineCategory = EngineCategory.OPERATIONS,
        is_core: bool = False,
        is_installed: bool = False,
        is_enabled: bool = False,
        depends_on: Sequence[str] = (),
        sort_order: int = 100,
        **extra: Any,
    ) -> TenantEngine:
        extra.setdefault("workspace_route", f"/{key}")
        row = TenantEngine(
            company_id=tenant_id,
            key=key,
            title=title or key.upper(),
            category=category,
            is_core=is_core,
            is_installed=is_installed,
            is_enabled=is_enabled,
            depends_on=list(depends_on),
            sort_order=sort_order,
            revision=1,
            **extra,
        )
        db.add(row)
        db.commit()
        return row

    return _add
