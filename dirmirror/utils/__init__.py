"""
Utilities Module

Logging setup and file content signatures.

Author: dirmirror Project
License: MIT
"""

from .file_ops import calculate_file_signature, calculate_bytes_signature, paths_overlap
from .logger import setup_logging, get_logger

__all__ = [
    'calculate_file_signature', 'calculate_bytes_signature', 'paths_overlap',
    'setup_logging', 'get_logger'
]
