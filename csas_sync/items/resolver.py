"""Resolves bound items to their current string values."""

import logging
from typing import Dict, List

from ..aggregator.transaction_aggregator import SimpleTransaction, TransactionAggregator
from ..data.bank_connector import BankConnector
from ..exceptions import CSASError
from ..formatting import format_money, group_thousands
from .bindings import ItemBinding, ItemKind

logger = logging.getLogger(__name__)

LOYALTY_ACCOUNT_ID = 'ibod'
NOT_AVAILABLE = 'N/A'


class TransactionCache:
    """Merged transaction lists per account, valid for a single refresh cycle."""

    def __init__(self, aggregator: TransactionAggregator):
        self.aggregator = aggregator
        self._records: Dict[str, List[SimpleTransaction]] = {}

    async def get_or_fetch(self, entity_id: str) -> List[SimpleTransaction]:
        if entity_id not in self._records:
            self._records[entity_id] = await self.aggregator.fetch(entity_id)
        return self._records[entity_id]

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._records


class ItemResolver:
    """Maps an item binding to the value it should display."""

    def __init__(self, bank_connector: BankConnector):
        self.bank_connector = bank_connector

    async def resolve(self, binding: ItemBinding, transaction_cache: TransactionCache) -> str:
        """
        Compute the value of a bound item.

        Never raises for upstream failures: balances resolve to an empty string
        and transaction ordinals past the end of the list resolve to an empty string.
        """
        kind = binding.kind
        if kind is ItemKind.BALANCE or kind is ItemKind.DISPOSABLE_BALANCE:
            return await self._resolve_balance(binding)
        elif kind.is_transaction:
            records = await transaction_cache.get_or_fetch(binding.entity_id)
            if binding.ordinal < 1 or binding.ordinal > len(records):
                return ''
            return self._transaction_field(records[binding.ordinal - 1], kind)
        raise ValueError(f"Unsupported item kind: {kind}")

    async def _resolve_balance(self, binding: ItemBinding) -> str:
        try:
            if binding.entity_id == LOYALTY_ACCOUNT_ID:
                points = await self.bank_connector.get_loyalty_points()
                return NOT_AVAILABLE if points is None else group_thousands(points)
            amount = await self.bank_connector.get_balance(
                binding.entity_id, disposable=binding.kind is ItemKind.DISPOSABLE_BALANCE
            )
            balance = format_money(amount)
            logger.debug(f"CSAS Balance: {balance}")
            return balance
        except CSASError as e:
            logger.error(f"Cannot get CSAS balance for {binding.item_name} ({binding.entity_id}): {e}")
            return ''

    @staticmethod
    def _transaction_field(record: SimpleTransaction, kind: ItemKind) -> str:
        if kind is ItemKind.TRANSACTION_BALANCE:
            return record.balance
        elif kind is ItemKind.TRANSACTION_PARTY:
            return record.party_description
        elif kind is ItemKind.TRANSACTION_INFO:
            return record.party_info
        elif kind is ItemKind.TRANSACTION_VS:
            return record.variable_symbol
        elif kind is ItemKind.TRANSACTION_DESCRIPTION:
            return record.description
        raise ValueError(f"Unsupported transaction item kind: {kind}")
