"""Aggregator package for reservation and transaction processing."""

from .transaction_aggregator import TransactionAggregator, SimpleTransaction

__all__ = ['TransactionAggregator', 'SimpleTransaction']
