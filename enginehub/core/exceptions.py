"""
引擎注册中心异常定义

所有异常都是调用方可恢复的业务错误，不会终止进程：

    EngineRegistryException
    +-- EngineNotFoundException          (404)
    +-- InvalidEngineKeyException        (400)
    +-- CoreEngineImmutableException     (409)
    +-- EngineNotInstalledException      (409)
    +-- MissingDependenciesException     (409)
    +-- DependentsExistException         (409)
    +-- DependencyCycleException         (409)
    +-- ConcurrentModificationException  (409)

存储层异常（SQLAlchemyError 等）不在此列，原样向上传播。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from enginehub.core.engines.base import EngineRecord


class EngineRegistryException(Exception):
    """注册中心异常基类"""

    status_code: int = 400
    error_type: str = "engine_registry_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.error_type,
            "message": self.message,
            "details": self.details,
        }


class EngineNotFoundException(EngineRegistryException):
    """租户下不存在该引擎"""

    status_code = 404
    error_type = "engine_not_found"

    def __init__(self, tenant_id: str, key: str):
        self.tenant_id = tenant_id
        self.key = key
        super().__init__(
            f"引擎 '{key}' 不存在", details={"tenant_id": tenant_id, "key": key}
        )


class InvalidEngineKeyException(EngineRegistryException):
    """引擎 key 格式非法"""

    status_code = 400
    error_type = "invalid_engine_key"

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"引擎 key '{key}' 格式非法，只允许小写字母、数字、下划线和连字符",
            details={"key": key},
        )


class CoreEngineImmutableException(EngineRegistryException):
    """核心引擎不允许禁用或卸载"""

    status_code = 409
    error_type = "core_engine_immutable"

    def __init__(self, engine: EngineRecord, action: str):
        self.engine = engine
        self.action = action
        super().__init__(
            f"核心引擎 {engine.title} 不能被{action}",
            details={"key": engine.key, "action": action},
        )


class EngineNotInstalledException(EngineRegistryException):
    """启用前必须先安装"""

    status_code = 409
    error_type = "engine_not_installed"

    def __init__(self, engine: EngineRecord):
        self.engine = engine
        super().__init__(
            f"引擎 {engine.title} 尚未安装，请先安装或使用 enable_with_dependencies",
            details={"key": engine.key},
        )


class MissingDependenciesException(EngineRegistryException):
    """
    依赖未满足

    missing 为可展示的引擎列表（供调用方提示"是否一并启用"），
    dangling_keys 为 depends_on 中指向不存在记录的 key。
    """

    status_code = 409
    error_type = "missing_dependencies"

    def __init__(
        self,
        engine: EngineRecord,
        missing: Sequence[EngineRecord],
        dangling_keys: Sequence[str] = (),
    ):
        self.engine = engine
        self.missing: List[EngineRecord] = list(missing)
        self.dangling_keys: List[str] = list(dangling_keys)
        names = [dep.title for dep in self.missing] + self.dangling_keys
        super().__init__(
            f"无法启用 {engine.title}，缺少依赖: {', '.join(names)}",
            details={
                "key": engine.key,
                "missing": [dep.key for dep in self.missing],
                "dangling_keys": self.dangling_keys,
            },
        )

    @property
    def missing_keys(self) -> List[str]:
        return [dep.key for dep in self.missing]


class DependentsExistException(EngineRegistryException):
    """仍有已启用引擎依赖当前引擎"""

    status_code = 409
    error_type = "dependents_exist"

    def __init__(self, engine: EngineRecord, dependents: Sequence[EngineRecord]):
        self.engine = engine
        self.dependents: List[EngineRecord] = list(dependents)
        super().__init__(
            f"无法移除 {engine.title}，以下引擎依赖它: "
            f"{', '.join(dep.title for dep in self.dependents)}",
            details={"key": engine.key, "dependents": [dep.key for dep in self.dependents]},
        )

    @property
    def dependent_keys(self) -> List[str]:
        return [dep.key for dep in self.dependents]


class DependencyCycleException(EngineRegistryException):
    """依赖图中存在环"""

    status_code = 409
    error_type = "dependency_cycle"

    def __init__(self, cycle: Sequence[str]):
        self.cycle: List[str] = list(cycle)
        super().__init__(
            f"检测到循环依赖: {' -> '.join(self.cycle)}", details={"cycle": self.cycle}
        )


class ConcurrentModificationException(EngineRegistryException):
    """乐观锁冲突：读取后记录已被其他请求修改"""

    status_code = 409
    error_type = "concurrent_modification"

    def __init__(self, tenant_id: str, key: str, expected_revision: int):
        self.tenant_id = tenant_id
        self.key = key
        self.expected_revision = expected_revision
        super().__init__(
            f"引擎 '{key}' 已被其他请求修改，请刷新后重试",
            details={"key": key, "expected_revision": expected_revision},
        )
