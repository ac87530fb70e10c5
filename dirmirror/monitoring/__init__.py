"""
Monitoring Module

Source directory change detection.

Author: dirmirror Project
License: MIT
"""

from .watcher import FileWatcher, SourceChangeHandler

__all__ = ['FileWatcher', 'SourceChangeHandler']
