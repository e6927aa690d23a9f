# odds_service/utils/text.py
# Centralized text normalization utilities
from typing import Optional

from selectolax.parser import Node


def clean_text(text: Optional[str]) -> str:
    """Strips leading/trailing whitespace and collapses internal whitespace."""
    if not text:
        return ""
    return " ".join(text.strip().split())


def node_text(node: Optional[Node]) -> str:
    """Full text of a node and its descendants, whitespace-collapsed."""
    if node is None:
        return ""
    return clean_text(node.text(deep=True, separator=""))


def own_text(node: Optional[Node]) -> str:
    """
    Text held directly by a node, ignoring anything contributed by child
    elements (badges, icons and similar decorations nested in a heading).
    """
    if node is None:
        return ""
    return clean_text(node.text(deep=False, separator=""))
