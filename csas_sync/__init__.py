"""CSAS Sync - periodic synchronization of Česká spořitelna netbanking data into items."""

__version__ = "0.1.0"
