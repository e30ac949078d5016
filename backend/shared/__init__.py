"""
Shared utilities and configuration
"""

from .config import settings, Settings
from .models import RankingParameters, RankedDocument
from .utils import (
    split_tokens,
    take_until,
    link_file_path
)

__all__ = [
    "settings",
    "Settings",
    "RankingParameters",
    "RankedDocument",
    "split_tokens",
    "take_until",
    "link_file_path"
]
