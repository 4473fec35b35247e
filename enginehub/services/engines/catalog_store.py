"""
基于 SQLAlchemy 的引擎目录存储

写入使用 UPDATE ... WHERE revision = :expected 实现比较并交换，
影响行数为 0 时区分"记录不存在"与"并发修改"。
"""

from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from enginehub.core.engines.base import (
    EngineCategory,
    EngineDefinition,
    EngineRecord,
    EngineStateChange,
)
from enginehub.core.exceptions import ConcurrentModificationException, EngineNotFoundException
from enginehub.core.logger import logger
from enginehub.models.database import TenantEngine


def to_record(row: TenantEngine) -> EngineRecord:
    """ORM 行转换为不可变快照"""
    return EngineRecord(
        tenant_id=row.company_id,
        key=row.key,
        title=row.title,
        category=EngineCategory(row.category),
        is_core=bool(row.is_core),
        is_installed=bool(row.is_installed),
        is_enabled=bool(row.is_enabled),
        depends_on=tuple(row.depends_on or ()),
        description=row.description,
        icon=row.icon,
        workspace_route=row.workspace_route,
        settings_route=row.settings_route,
        sort_order=row.sort_order,
        version=row.version,
        revision=row.revision,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyEngineCatalogStore:
    """引擎目录存储（engines 表）"""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _query(self, tenant_id: str):
        # populate_existing 确保读到其他写入之后的最新值
        return (
            self.db.query(TenantEngine)
            .populate_existing()
            .filter(TenantEngine.company_id == tenant_id)
        )

    def fetch_all(self, tenant_id: str) -> List[EngineRecord]:
        rows = self._query(tenant_id).order_by(
            TenantEngine.sort_order.asc(), TenantEngine.title.asc()
        )
        return [to_record(row) for row in rows.all()]

    def fetch_one(self, tenant_id: str, key: str) -> Optional[EngineRecord]:
        row = self._query(tenant_id).filter(TenantEngine.key == key).first()
        return to_record(row) if row else None

    def update(
        self,
        tenant_id: str,
        key: str,
        change: EngineStateChange,
        expected_revision: int,
    ) -> EngineRecord:
        values = change.as_values()
        values["revision"] = TenantEngine.revision + 1

        stmt = (
            update(TenantEngine)
            .where(
                TenantEngine.company_id == tenant_id,
                TenantEngine.key == key,
                TenantEngine.revision == expected_revision,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)

        if result.rowcount == 0:
            self.db.rollback()
            if self.fetch_one(tenant_id, key) is None:
                raise EngineNotFoundException(tenant_id, key)
            logger.warning(
                f"Engine [{key}] revision conflict for tenant {tenant_id} "
                f"(expected {expected_revision})"
            )
            raise ConcurrentModificationException(tenant_id, key, expected_revision)

        self.db.commit()
        record = self.fetch_one(tenant_id, key)
        assert record is not None
        logger.debug(f"Engine [{key}] updated to revision {record.revision}: {values}")
        return record

    def add(self, tenant_id: str, definition: EngineDefinition) -> EngineRecord:
        row = TenantEngine(
            company_id=tenant_id,
            key=definition.key,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            category=definition.category,
            is_core=definition.is_core,
            is_installed=definition.is_core,
            is_enabled=definition.is_core,
            depends_on=list(definition.depends_on),
            workspace_route=definition.workspace_route,
            settings_route=definition.settings_route,
            sort_order=definition.sort_order,
            version=definition.version,
            revision=1,
        )
        self.db.add(row)
        self.db.commit()
        return to_record(row)
