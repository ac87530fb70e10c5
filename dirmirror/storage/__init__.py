"""
Storage Module

Backing stores the synchronization engine operates against.

Author: dirmirror Project
License: MIT
"""

from .base import Storage
from .local import LocalStorage
from .memory import InMemoryStorage

__all__ = ['Storage', 'LocalStorage', 'InMemoryStorage']
