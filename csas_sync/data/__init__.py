"""Data package for netbanking connectivity and the entity cache."""

from .bank_connector import BankConnector
from .entity_cache import EntityCache

__all__ = ['BankConnector', 'EntityCache']
