"""
Configuration Management Module
统一配置管理，实现API配置解耦
"""
from .settings import (
    Settings,
    GeometrySettings,
    TwitterSettings,
    get_settings,
    get_twitter_settings,
    get_geometry_settings,
    get_schedule_settings,
)

__all__ = [
    "Settings",
    "GeometrySettings",
    "TwitterSettings",
    "get_settings",
    "get_twitter_settings",
    "get_geometry_settings",
    "get_schedule_settings",
]
