"""
enginehub - 多租户功能引擎注册中心
"""

__version__ = "0.4.0"
