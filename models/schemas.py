"""
Data Models / Schemas
搜索结果的统一数据结构
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """数据来源类型"""
    TWITTER = "twitter"


class SocialPost(BaseModel):
    """社交媒体帖子模型"""
    id: str = Field(..., description="帖子ID")
    content: str = Field(..., description="内容")
    author: str = Field(default="Unknown", description="作者")
    created_at: Optional[datetime] = Field(None, description="发布时间")
    url: str = Field(..., description="帖子链接")
    image_url: Optional[str] = Field(None, description="第一张图片链接")
    source: SourceType = Field(..., description="数据来源")
    extra: Dict[str, Any] = Field(default_factory=dict)
