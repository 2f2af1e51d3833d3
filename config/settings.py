"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class TwitterSettings(BaseSettings):
    """Twitter/X API 配置"""
    bearer_token: Optional[str] = Field(default=None, description="Twitter Bearer Token")
    query: str = Field(default="#legodiver", description="搜索关键词 / 话题标签")
    max_results: int = Field(default=10, description="最大返回结果数 (10-100)")

    class Config:
        env_prefix = "TWITTER_"


class GeometrySettings(BaseSettings):
    """Geometry Backend 配置"""
    ticket: Optional[str] = Field(default=None, description="Backend ticket")
    model_view_url: str = Field(default="https://sdeuc1.eu-central-1.shapediver.com", description="Model view URL")
    timeout_s: float = Field(default=30.0, description="单次 HTTP 请求超时(秒)")
    customization_max_wait_msec: int = Field(default=120000, description="计算等待上限(毫秒)，<0 表示不限")
    export_max_wait_msec: int = Field(default=120000, description="导出等待上限(毫秒)，<0 表示不限")
    export_server_wait_msec: int = Field(default=30000, description="导出请求中的服务端等待提示(毫秒)")

    class Config:
        env_prefix = "GEOMETRY_"


class ScheduleSettings(BaseSettings):
    """定时触发配置"""
    interval_sec: float = Field(default=300.0, description="触发周期(秒)")

    class Config:
        env_prefix = "SCHEDULE_"


class GeneralSettings(BaseSettings):
    """通用设置"""
    log_level: str = Field(default="INFO", description="日志级别")
    log_file: Optional[str] = Field(default=None, description="日志文件名 (可选)")


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    twitter: TwitterSettings = Field(default_factory=TwitterSettings)
    geometry: GeometrySettings = Field(default_factory=GeometrySettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            # 默认查找 config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            twitter=TwitterSettings(),
            geometry=GeometrySettings(),
            schedule=ScheduleSettings(),
            general=GeneralSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


# 便捷访问
def get_twitter_settings() -> TwitterSettings:
    return get_settings().twitter


def get_geometry_settings() -> GeometrySettings:
    return get_settings().geometry


def get_schedule_settings() -> ScheduleSettings:
    return get_settings().schedule
