"""
Data Models
"""
from .schemas import (
    SourceType,
    SocialPost,
)

__all__ = [
    "SourceType",
    "SocialPost",
]
