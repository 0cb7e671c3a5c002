"""Controller package for driving the BST trainer."""

from .controller import Controller, parse_key
from .logger import Logger

__all__ = ['Controller', 'parse_key', 'Logger']
