"""Configuration and logging setup."""

from .settings import TraderConfig
from .logging_config import setup_logging

__all__ = ['TraderConfig', 'setup_logging']
