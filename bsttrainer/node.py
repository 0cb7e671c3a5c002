"""Tree node with display position and transient annotation."""

from enum import Enum
from typing import Optional, Tuple
import numpy as np


class Highlight(Enum):
    """Highlight state of a node."""
    NONE = "none"
    SEARCH_PATH = "search_path"
    TRAVERSAL = "traversal"
    IMBALANCE = "imbalance"


class Marker(Enum):
    """Direction marker shown while a traversal visits a node."""
    NONE = "none"
    PRE = "pre"
    IN = "in"
    POST = "post"


class Node:
    """A tree element: key, two owned children, position and annotation."""

    __slots__ = ("key", "left", "right", "position", "target", "highlight", "marker")

    def __init__(self, key, position: Tuple[float, float] = (0.0, 0.0)):
        """
        Initialize node.

        Args:
            key: Numeric key
            position: Initial display position, also used as the first target
        """
        self.key = key
        self.left: Optional["Node"] = None
        self.right: Optional["Node"] = None
        self.position = np.array(position, dtype=float)
        self.target = self.position.copy()
        self.highlight = Highlight.NONE
        self.marker = Marker.NONE

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def set_target(self, x: float, y: float):
        self.target[0] = x
        self.target[1] = y

    def step_toward_target(self, factor: float):
        """Move the current position a fraction of the way to the target."""
        self.position += (self.target - self.position) * factor

    def clear_annotation(self):
        self.highlight = Highlight.NONE
        self.marker = Marker.NONE

    def __repr__(self) -> str:
        return f"Node({self.key!r})"
