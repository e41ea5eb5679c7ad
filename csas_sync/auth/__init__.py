"""Authentication package for the CSAS OAuth token lifecycle."""

from .oauth_manager import TokenManager

__all__ = ['TokenManager']
