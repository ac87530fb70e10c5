"""
dirmirror Configuration Module

Loads mirror jobs and application settings from YAML with environment
variable overrides, validated through Pydantic models.

Author: dirmirror Project
License: MIT
"""

from .schema import Config, AppConfig, MirrorJob, SchedulingConfig, MonitoringConfig, LogLevel
from .config_loader import ConfigLoader, load_config

__all__ = [
    'Config', 'AppConfig', 'MirrorJob', 'SchedulingConfig', 'MonitoringConfig', 'LogLevel',
    'ConfigLoader', 'load_config'
]
