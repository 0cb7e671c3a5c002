"""BST Trainer - animated binary search tree and AVL tree engine."""

__version__ = "0.1.0"

from .config import TrainerConfig, create_default_config, create_fast_config
from .node import Node, Highlight, Marker
from .step_gate import StepGate, StepMode, StepGateBusyError
from .stats import TreeStats
from .tree import TreeEngine, Discipline, Traversal, Rotation
from .renderer import Renderer

__all__ = [
    'TrainerConfig',
    'create_default_config',
    'create_fast_config',
    'Node',
    'Highlight',
    'Marker',
    'StepGate',
    'StepMode',
    'StepGateBusyError',
    'TreeStats',
    'TreeEngine',
    'Discipline',
    'Traversal',
    'Rotation',
    'Renderer',
]
