"""管理 API 路由"""

from enginehub.api.admin.engines import router as engines_router

__all__ = ["engines_router"]
