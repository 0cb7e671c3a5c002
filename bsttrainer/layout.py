"""Layout calculator - target display coordinates from tree shape."""

from typing import Optional, Tuple
from .node import Node


def compute_layout(root: Optional[Node], anchor: Tuple[float, float],
                   gap: float, level_height: float):
    """
    Assign target positions to every node of a tree.

    The root sits at the anchor. Each child is offset horizontally by the
    current gap and vertically by one level height; the gap halves at every
    level so sibling subtrees never overlap. Current positions are left
    untouched.

    Args:
        root: Root of the tree (None for an empty tree)
        anchor: Position (x, y) of the root slot
        gap: Horizontal offset between the root and its children
        level_height: Vertical distance between depth levels
    """
    _place(root, anchor[0], anchor[1], gap, level_height)


def _place(node: Optional[Node], x: float, y: float, gap: float, level_height: float):
    if node is None:
        return
    node.set_target(x, y)
    _place(node.left, x - gap, y + level_height, gap / 2, level_height)
    _place(node.right, x + gap, y + level_height, gap / 2, level_height)
