"""
Text utility functions.
"""
from typing import Iterable, List, Optional


def parse_tags(tags: Optional[str]) -> List[str]:
    """
    Parse a comma-separated tag list.

    Tags are trimmed and empty entries are dropped, so ``" a, ,b "`` becomes
    ``["a", "b"]``. ``None`` or a blank string yields an empty list.
    """
    if not tags or not tags.strip():
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim tags, drop empties and duplicates, keep first-seen order."""
    seen = set()
    result = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
