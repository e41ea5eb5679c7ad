"""Configuration package for CSAS Sync."""

from .settings import load_config

__all__ = ['load_config']
