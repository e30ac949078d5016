"""
Shared utility functions
"""

import os
from typing import Iterable, List


def split_tokens(text: str) -> List[str]:
    """Split text into whitespace-separated tokens"""
    return text.split()


def take_until(tokens: Iterable[str], marker: str) -> List[str]:
    """Collect tokens up to (not including) the first end marker"""
    collected = []
    for token in tokens:
        if token == marker:
            break
        collected.append(token)
    return collected


def link_file_path(directory: str, name: str, suffix: str = ".txt") -> str:
    """Build the path of a document's link file"""
    return os.path.join(directory, f"{name}{suffix}")
