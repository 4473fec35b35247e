"""
标准引擎定义

租户开通时按此目录创建引擎记录
"""

from typing import List

from enginehub.core.engines.base import EngineCategory, EngineDefinition


def _engine(key: str, title: str, category: EngineCategory, **kwargs) -> EngineDefinition:
    kwargs.setdefault("workspace_route", f"/{key}")
    return EngineDefinition(key=key, title=title, category=category, **kwargs)


OPERATIONS_ENGINES: List[EngineDefinition] = [
    _engine(
        "inventory",
        "Inventory",
        EngineCategory.OPERATIONS,
        description="Track stock, locations and asset movements",
        icon="Package",
        is_core=True,
        settings_route="/settings/inventory",
        sort_order=10,
    ),
    _engine(
        "processing",
        "Processing",
        EngineCategory.OPERATIONS,
        description="Test, grade and refurbish incoming assets",
        icon="Wrench",
        is_core=True,
        sort_order=20,
    ),
    _engine(
        "receiving",
        "Receiving",
        EngineCategory.OPERATIONS,
        description="Receive purchase orders and intake shipments",
        icon="PackageCheck",
        is_core=True,
        sort_order=30,
    ),
    _engine(
        "lots",
        "Purchase Lots",
        EngineCategory.OPERATIONS,
        description="Group purchased assets into lots for cost tracking",
        icon="Boxes",
        depends_on=("receiving",),
        sort_order=40,
    ),
    _engine(
        "repairs",
        "Repairs",
        EngineCategory.OPERATIONS,
        description="Repair tickets and parts usage",
        icon="Hammer",
        depends_on=("processing",),
        sort_order=50,
    ),
    _engine(
        "recycling",
        "Recycling",
        EngineCategory.OPERATIONS,
        description="Component harvesting and material recovery",
        icon="Recycle",
        settings_route="/settings/recycling",
        sort_order=60,
    ),
]

SALES_ENGINES: List[EngineDefinition] = [
    _engine(
        "reseller",
        "IT Reseller",
        EngineCategory.SALES,
        description="Buy, refurbish, and sell IT equipment",
        icon="ShoppingCart",
        settings_route="/settings/reseller",
        sort_order=100,
    ),
    _engine(
        "auction",
        "Auctions",
        EngineCategory.SALES,
        description="Bulk sales through auction channels",
        icon="Gavel",
        depends_on=("reseller",),
        settings_route="/settings/auction",
        sort_order=110,
    ),
    _engine(
        "website",
        "eCommerce",
        EngineCategory.SALES,
        description="Public storefront and website pages",
        icon="Globe",
        depends_on=("reseller",),
        sort_order=120,
    ),
    _engine(
        "consignment",
        "Consignment",
        EngineCategory.SALES,
        description="Manage customer-owned inventory",
        icon="Handshake",
        depends_on=("reseller",),
        sort_order=130,
    ),
]

BUSINESS_ENGINES: List[EngineDefinition] = [
    _engine(
        "itad",
        "ITAD Services",
        EngineCategory.BUSINESS,
        description="IT Asset Disposition services for enterprise clients",
        icon="ShieldCheck",
        depends_on=("processing",),
        sort_order=200,
    ),
    _engine(
        "crm",
        "CRM",
        EngineCategory.BUSINESS,
        description="Customer relationship management",
        icon="Users",
        settings_route="/settings/crm",
        sort_order=210,
    ),
    _engine(
        "accounting",
        "Accounting",
        EngineCategory.BUSINESS,
        description="Chart of accounts, journal entries and payments",
        icon="Calculator",
        sort_order=220,
    ),
    _engine(
        "esg",
        "ESG Reporting",
        EngineCategory.BUSINESS,
        description="Environmental impact and compliance reporting",
        icon="Leaf",
        depends_on=("recycling",),
        sort_order=230,
    ),
]

SYSTEM_ENGINES: List[EngineDefinition] = [
    _engine(
        "reports",
        "Reports",
        EngineCategory.SYSTEM,
        description="Operational and financial reports",
        icon="BarChart3",
        sort_order=300,
    ),
    _engine(
        "settings",
        "Settings",
        EngineCategory.SYSTEM,
        description="Company-wide configuration",
        icon="Settings",
        is_core=True,
        sort_order=310,
    ),
]

ADMIN_ENGINES: List[EngineDefinition] = [
    _engine(
        "users",
        "Users",
        EngineCategory.ADMIN,
        description="User accounts and roles",
        icon="UserCog",
        is_core=True,
        sort_order=400,
    ),
    _engine(
        "apps",
        "Apps",
        EngineCategory.ADMIN,
        description="Install and manage engines",
        icon="LayoutGrid",
        is_core=True,
        sort_order=410,
    ),
]
