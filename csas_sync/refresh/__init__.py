"""Refresh package driving the periodic synchronization."""

from .refresh_cycle import CycleState, RefreshCycle

__all__ = ['CycleState', 'RefreshCycle']
