"""Animated tree engine - BST and AVL algorithms paced by a step gate."""

import asyncio
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from .config import TrainerConfig
from .layout import compute_layout
from .node import Highlight, Marker, Node
from .stats import (TreeStats, balance_factor, compute_stats, count_nodes,
                    in_order_keys, iter_nodes)
from .step_gate import StepGate


class Discipline(Enum):
    """Structural invariant set enforced by the tree."""
    BST = "BST"
    AVL = "AVL"


class Traversal(Enum):
    """Depth-first traversal orders."""
    PRE_ORDER = "pre"
    IN_ORDER = "in"
    POST_ORDER = "post"

    @property
    def label(self) -> str:
        return {"pre": "PreOrder", "in": "InOrder", "post": "PostOrder"}[self.value]

    @property
    def marker(self) -> Marker:
        return Marker(self.value)


@dataclass(frozen=True)
class Rotation:
    """A rotation performed while rebalancing an AVL tree."""
    direction: str  # "left" or "right"
    pivot: Any  # Key of the node rotated around
    case: str  # "LL", "RR", "LR" or "RL"

    @property
    def label(self) -> str:
        label = f"{self.direction.title()} Rotation"
        if self.case in ("LR", "RL"):
            label += f" ({self.case})"
        return label

    @property
    def message(self) -> str:
        return f"Performing {self.label} on Node {self.pivot}"


def is_valid_key(key) -> bool:
    """Check that a key is a finite real number."""
    if isinstance(key, bool) or not isinstance(key, numbers.Real):
        return False
    return math.isfinite(key)


class TreeEngine:
    """
    Owner of the tree and of every algorithm that changes or walks it.

    Operations are coroutines. Each visually meaningful sub-step awaits the
    step gate, which suspends the whole recursive call chain until the gate
    lets it continue. Operations are serialized by a lock, so a second
    operation started while one is in flight waits for it to finish.

    Outputs observable while an operation runs:
    - stats: height, node count and leaf count after the last mutation
    - output / output_label: the traversal sequence, appended per visit
    - rotation_message: text of the rotation being announced, if any
    - rotations: rotations performed by the last insert or delete
    - events delivered to the callback set with set_event_callback()
    """

    def __init__(self, config: TrainerConfig, gate: Optional[StepGate] = None,
                 discipline: Discipline = Discipline.BST):
        """
        Initialize tree engine.

        Args:
            config: Configuration object
            gate: Step gate shared with the controller (created if None)
            discipline: Initial discipline
        """
        self.config = config
        self.gate = gate if gate is not None else StepGate(config.step_duration)
        self.discipline = Discipline(discipline)

        self.root: Optional[Node] = None
        self.pending: Optional[Node] = None

        self.stats = TreeStats()
        self.output: List = []
        self.output_label = ""
        self.rotation_message: Optional[str] = None
        self.rotations: List[Rotation] = []
        self.last_search_found: Optional[bool] = None

        # Serializes operations triggered by the controller
        self._lock = asyncio.Lock()

        # Callback for engine events (optional)
        self._event_callback: Optional[Callable[[str, Any], None]] = None

    @property
    def is_busy(self) -> bool:
        """Check if an operation is in flight."""
        return self._lock.locked()

    def set_event_callback(self, callback: Callable[[str, Any], None]):
        """
        Set callback for engine events.

        Args:
            callback: Function called with (event name, payload)
        """
        self._event_callback = callback

    def _emit(self, event: str, payload: Any = None):
        if self._event_callback:
            self._event_callback(event, payload)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    async def insert(self, key) -> bool:
        """
        Drop a key into the tree.

        Args:
            key: Numeric key; anything else is ignored

        Returns:
            True if a node was linked, False for rejected input or an AVL duplicate
        """
        if not is_valid_key(key):
            return False

        async with self._lock:
            self.rotations = []
            await self._drop(key)

            before = count_nodes(self.root)
            if self.root is None:
                self.root = Node(key, self.config.root_anchor)
            elif self.discipline is Discipline.BST:
                self._insert_bst(self.root, key)
            else:
                self.root = await self._insert_avl(self.root, key, self.root.position)
            linked = count_nodes(self.root) > before

            self._finish_mutation()
            if linked:
                self._emit("insert", key)
            return linked

    async def _drop(self, key):
        """Animate the new key falling onto the root slot."""
        if self.root is not None:
            target_x, target_y = float(self.root.position[0]), float(self.root.position[1])
        else:
            target_x, target_y = self.config.root_anchor

        self.pending = Node(key, (target_x, self.config.drop_start_y))
        self.pending.set_target(target_x, target_y)
        while abs(self.pending.position[1] - target_y) > self.config.drop_epsilon:
            await self.gate.pause(self.config.frame_duration)
            self.pending.step_toward_target(self.config.lerp_factor)
        self.pending = None

    def _insert_bst(self, node: Node, key):
        # Equal keys go right
        if key < node.key:
            if node.left is None:
                node.left = Node(key, node.position)
            else:
                self._insert_bst(node.left, key)
        else:
            if node.right is None:
                node.right = Node(key, node.position)
            else:
                self._insert_bst(node.right, key)

    async def _insert_avl(self, node: Optional[Node], key, origin) -> Node:
        if node is None:
            return Node(key, origin)

        if key < node.key:
            node.left = await self._insert_avl(node.left, key, node.position)
        elif key > node.key:
            node.right = await self._insert_avl(node.right, key, node.position)
        else:
            return node

        balance = balance_factor(node)

        if balance > 1 and key < node.left.key:
            return await self._rotate_right(node, "LL")
        if balance < -1 and key > node.right.key:
            return await self._rotate_left(node, "RR")
        if balance > 1 and key > node.left.key:
            node.left = await self._rotate_left(node.left, "LR")
            return await self._rotate_right(node, "LR")
        if balance < -1 and key < node.right.key:
            node.right = await self._rotate_right(node.right, "RL")
            return await self._rotate_left(node, "RL")

        return node

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def delete(self, key) -> bool:
        """
        Remove a key from the tree.

        Args:
            key: Numeric key; anything else is ignored

        Returns:
            True if a node was removed, False if the key was absent or invalid
        """
        if not is_valid_key(key):
            return False

        async with self._lock:
            self.rotations = []
            before = count_nodes(self.root)
            if self.discipline is Discipline.BST:
                self.root = self._delete_bst(self.root, key)
            else:
                self.root = await self._delete_avl(self.root, key)
            removed = count_nodes(self.root) < before

            self._finish_mutation()
            if removed:
                self._emit("delete", key)
            return removed

    def _delete_bst(self, node: Optional[Node], key) -> Optional[Node]:
        if node is None:
            return None

        if key < node.key:
            node.left = self._delete_bst(node.left, key)
            return node
        if key > node.key:
            node.right = self._delete_bst(node.right, key)
            return node

        if node.left is None:
            return node.right
        if node.right is None:
            return node.left

        # Two children: take over the in-order successor's key
        successor = _min_node(node.right)
        node.key = successor.key
        node.right = self._delete_bst(node.right, successor.key)
        return node

    async def _delete_avl(self, node: Optional[Node], key) -> Optional[Node]:
        if node is None:
            return None

        if key < node.key:
            node.left = await self._delete_avl(node.left, key)
        elif key > node.key:
            node.right = await self._delete_avl(node.right, key)
        elif node.left is None or node.right is None:
            node = node.left if node.left is not None else node.right
        else:
            successor = _min_node(node.right)
            node.key = successor.key
            node.right = await self._delete_avl(node.right, successor.key)

        if node is None:
            return None

        balance = balance_factor(node)

        if balance > 1 and balance_factor(node.left) >= 0:
            return await self._rotate_right(node, "LL")
        if balance > 1 and balance_factor(node.left) < 0:
            node.left = await self._rotate_left(node.left, "LR")
            return await self._rotate_right(node, "LR")
        if balance < -1 and balance_factor(node.right) <= 0:
            return await self._rotate_left(node, "RR")
        if balance < -1 and balance_factor(node.right) > 0:
            node.right = await self._rotate_right(node.right, "RL")
            return await self._rotate_left(node, "RL")

        return node

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------

    async def _rotate_right(self, pivot: Node, case: str) -> Node:
        await self._announce(Rotation("right", pivot.key, case), pivot)
        new_root = pivot.left
        pivot.left = new_root.right
        new_root.right = pivot
        return new_root

    async def _rotate_left(self, pivot: Node, case: str) -> Node:
        await self._announce(Rotation("left", pivot.key, case), pivot)
        new_root = pivot.right
        pivot.right = new_root.left
        new_root.left = pivot
        return new_root

    async def _announce(self, rotation: Rotation, pivot: Node):
        """Show the imbalance and the rotation about to happen."""
        pivot.highlight = Highlight.IMBALANCE
        self.update_layout()
        self.rotation_message = rotation.message
        self.rotations.append(rotation)
        self._emit("rotation", rotation)

        await self.gate.pause(self.config.rotation_duration)

        pivot.highlight = Highlight.NONE
        self.rotation_message = None

    # ------------------------------------------------------------------
    # Search and traversals
    # ------------------------------------------------------------------

    async def search(self, key) -> bool:
        """
        Walk from the root toward a key, highlighting the search path.

        A hit stays highlighted. A miss fires the not_found event and clears
        every highlight.

        Args:
            key: Numeric key; anything else is ignored

        Returns:
            True if the key was found
        """
        if not is_valid_key(key):
            return False

        async with self._lock:
            self.clear_highlights()
            current = self.root
            while current is not None:
                current.highlight = Highlight.SEARCH_PATH
                await self.gate.pause(self.config.search_duration)
                if key == current.key:
                    self.last_search_found = True
                    self._emit("found", key)
                    return True

                current.highlight = Highlight.NONE
                current = current.left if key < current.key else current.right

            self.last_search_found = False
            self._emit("not_found", key)
            self.clear_highlights()
            return False

    async def traverse(self, kind: Traversal) -> List:
        """
        Visit every node in the given depth-first order.

        Keys are appended to self.output as they are visited.

        Args:
            kind: Traversal order

        Returns:
            Visited keys in order
        """
        kind = Traversal(kind)
        async with self._lock:
            self.clear_highlights()
            self.output.clear()
            self.output_label = kind.label

            await self._walk(self.root, kind)
            await self.gate.pause(self.config.traversal_hold_duration)

            self.clear_highlights()
            return list(self.output)

    async def pre_order(self) -> List:
        return await self.traverse(Traversal.PRE_ORDER)

    async def in_order(self) -> List:
        return await self.traverse(Traversal.IN_ORDER)

    async def post_order(self) -> List:
        return await self.traverse(Traversal.POST_ORDER)

    async def _walk(self, node: Optional[Node], kind: Traversal):
        if node is None:
            return
        if kind is Traversal.PRE_ORDER:
            await self._visit(node, kind)
        await self._walk(node.left, kind)
        if kind is Traversal.IN_ORDER:
            await self._visit(node, kind)
        await self._walk(node.right, kind)
        if kind is Traversal.POST_ORDER:
            await self._visit(node, kind)

    async def _visit(self, node: Node, kind: Traversal):
        node.highlight = Highlight.TRAVERSAL
        node.marker = kind.marker
        self.output.append(node.key)
        self._emit("visit", node.key)
        await self.gate.pause(self.config.visit_duration)
        node.marker = Marker.NONE

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    async def balance(self):
        """Rebuild the tree with minimal height, without animation steps."""
        async with self._lock:
            keys = in_order_keys(self.root)
            self.root = self._build_balanced(keys, 0, len(keys) - 1)
            self._finish_mutation()
            self._emit("balance", self.stats)

    def _build_balanced(self, keys: List, start: int, end: int) -> Optional[Node]:
        if start > end:
            return None
        mid = (start + end) // 2
        node = Node(keys[mid], self.config.root_anchor)
        node.left = self._build_balanced(keys, start, mid - 1)
        node.right = self._build_balanced(keys, mid + 1, end)
        return node

    async def clear(self):
        """Remove every node."""
        async with self._lock:
            self._reset()

    async def set_discipline(self, discipline: Discipline):
        """
        Switch between plain BST and AVL. Always clears the tree.

        Args:
            discipline: New discipline (member or its value)
        """
        discipline = Discipline(discipline)
        async with self._lock:
            self.discipline = discipline
            self._reset()

    def _reset(self):
        self.root = None
        self.pending = None
        self.output.clear()
        self.output_label = ""
        self.rotation_message = None
        self.rotations = []
        self.last_search_found = None
        self._finish_mutation()
        self._emit("clear", self.discipline)

    # ------------------------------------------------------------------
    # Layout, stats and render data
    # ------------------------------------------------------------------

    def update_layout(self):
        """Recompute target positions from the current shape."""
        compute_layout(self.root, self.config.root_anchor,
                       self.config.initial_gap, self.config.level_height)

    def resize(self, canvas_width: float):
        """
        Adapt the layout to a new canvas width.

        Args:
            canvas_width: Width of the drawing area
        """
        self.config.canvas_width = max(1.0, canvas_width)
        self.update_layout()

    def clear_highlights(self):
        for node in iter_nodes(self.root):
            node.clear_annotation()

    def nodes(self) -> List[Node]:
        """Linked nodes in pre-order."""
        return list(iter_nodes(self.root))

    def keys(self) -> List:
        """Keys in ascending (in-order) order."""
        return in_order_keys(self.root)

    def _finish_mutation(self):
        self.update_layout()
        self.stats = compute_stats(self.root)
        self._emit("stats", self.stats)

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data for rendering.

        Returns:
            Dictionary with render data
        """
        nodes = []
        edges = []
        for node in iter_nodes(self.root):
            nodes.append({
                'key': node.key,
                'position': node.position.copy(),
                'target': node.target.copy(),
                'highlight': node.highlight,
                'marker': node.marker,
            })
            for child in (node.left, node.right):
                if child is not None:
                    edges.append((node.position.copy(), child.position.copy()))

        pending = None
        if self.pending is not None:
            pending = {'key': self.pending.key, 'position': self.pending.position.copy()}

        return {
            'nodes': nodes,
            'edges': edges,
            'pending': pending,
            'stats': self.stats,
            'output': list(self.output),
            'output_label': self.output_label,
            'rotation_message': self.rotation_message,
            'discipline': self.discipline,
            'step_mode': self.gate.mode,
            'awaiting_advance': self.gate.awaiting_advance,
            'busy': self.is_busy,
        }


def _min_node(node: Node) -> Node:
    while node.left is not None:
        node = node.left
    return node
