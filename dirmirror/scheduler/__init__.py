"""
Scheduler Module

Periodic mirror runs.

Author: dirmirror Project
License: MIT
"""

from .task_scheduler import TaskScheduler, parse_cron

__all__ = ['TaskScheduler', 'parse_cron']
