"""Site navigation built from per-directory page slugs."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from ..models import NavigationItem


def build_navigation(items: Iterable[NavigationItem]) -> List[NavigationItem]:
    """Fold pages into a forest ordered by slug.

    A page whose slug starts with another page's slug becomes one of that
    page's children. Nesting stops at one level: every descendant lands under
    its top-most ancestor.
    """
    pending: Dict[str, NavigationItem] = {item.link: item for item in items}
    slugs = sorted(pending)
    forest: List[NavigationItem] = []

    for slug in slugs:
        item = pending.pop(slug, None)
        if item is None:
            continue
        children = [
            pending.pop(other)
            for other in slugs
            if other != slug and other.startswith(slug) and other in pending
        ]
        forest.append(replace(item, children=children))

    return forest


__all__ = ["build_navigation"]
