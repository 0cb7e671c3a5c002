"""Aggregate statistics - pure recursive folds over the tree."""

from dataclasses import dataclass
from typing import List, Optional
from .node import Node


@dataclass(frozen=True)
class TreeStats:
    """Displayed aggregates of a tree."""
    height: int = 0
    count: int = 0
    leaves: int = 0


def tree_height(node: Optional[Node]) -> int:
    if node is None:
        return 0
    return 1 + max(tree_height(node.left), tree_height(node.right))


def count_nodes(node: Optional[Node]) -> int:
    if node is None:
        return 0
    return 1 + count_nodes(node.left) + count_nodes(node.right)


def count_leaves(node: Optional[Node]) -> int:
    if node is None:
        return 0
    if node.is_leaf:
        return 1
    return count_leaves(node.left) + count_leaves(node.right)


def balance_factor(node: Optional[Node]) -> int:
    """Height of the left subtree minus height of the right subtree."""
    if node is None:
        return 0
    return tree_height(node.left) - tree_height(node.right)


def compute_stats(root: Optional[Node]) -> TreeStats:
    return TreeStats(
        height=tree_height(root),
        count=count_nodes(root),
        leaves=count_leaves(root)
    )


def in_order_keys(node: Optional[Node], keys: Optional[List] = None) -> List:
    """Collect keys left-to-right without any animation."""
    if keys is None:
        keys = []
    if node is not None:
        in_order_keys(node.left, keys)
        keys.append(node.key)
        in_order_keys(node.right, keys)
    return keys


def iter_nodes(node: Optional[Node]):
    """Yield nodes in pre-order."""
    if node is None:
        return
    yield node
    yield from iter_nodes(node.left)
    yield from iter_nodes(node.right)
