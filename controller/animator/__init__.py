"""Animator package for the BST trainer."""

from .pygame_framer import PygameFramer
from .animator import Animator

__all__ = ['PygameFramer', 'Animator']
