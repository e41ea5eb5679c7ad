"""Merges pending reservations and posted transactions of an account."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ..data.bank_connector import BankConnector
from ..data.entity_cache import EntityCache
from ..exceptions import ParseError, RequestError
from ..formatting import format_money, short_date

logger = logging.getLogger(__name__)

MAX_HISTORY_INTERVAL = 60
RESERVATION_PREFIX = 'RES '


@dataclass(frozen=True)
class SimpleTransaction:
    """Uniform view of a posted transaction or a pending reservation."""
    balance: str = ''
    description: str = ''
    variable_symbol: str = ''
    party_info: str = ''
    party_description: str = ''


def _text(value: Any) -> str:
    return '' if value is None else str(value)


def reservation_record(reservation: Dict[str, Any]) -> SimpleTransaction:
    """
    Normalize a reservation JSON object.

    Raises:
        ParseError: If the amount or creation date is missing or malformed.
    """
    shortdate = short_date(reservation.get('creationDate'))
    return SimpleTransaction(
        balance=f"{RESERVATION_PREFIX}{format_money(reservation.get('amount'))} {shortdate}",
        description=_text(reservation.get('description')),
        party_info=_text(reservation.get('merchantName')),
        party_description=_text(reservation.get('merchantAddress')),
    )


def transaction_record(transaction: Dict[str, Any]) -> SimpleTransaction:
    """
    Normalize a posted transaction JSON object.

    Raises:
        ParseError: If the amount or booking date is missing or malformed.
    """
    shortdate = short_date(transaction.get('bookingDate'))
    party = transaction.get('accountParty')
    if not isinstance(party, dict):
        party = {}
    return SimpleTransaction(
        balance=f"{format_money(transaction.get('amount'))} {shortdate}",
        description=_text(transaction.get('description')),
        variable_symbol=_text(transaction.get('variableSymbol')),
        party_info=_text(party.get('accountPartyInfo')),
        party_description=_text(party.get('accountPartyDescription')),
    )


class TransactionAggregator:
    """Builds the combined reservation + transaction list for one account."""

    def __init__(self, bank_connector: BankConnector, entity_cache: EntityCache, history_interval: int = 14):
        """
        Initialize the aggregator.

        Args:
            bank_connector: Connector used to fetch reservations and transactions.
            entity_cache: Cache providing the IBAN needed by the transaction endpoint.
            history_interval: Days of posted transactions to fetch, clamped to 1..60.
        """
        self.bank_connector = bank_connector
        self.entity_cache = entity_cache
        self.history_interval = max(1, min(history_interval, MAX_HISTORY_INTERVAL))
        logger.info(f"Transaction Aggregator initialized ({self.history_interval} days of history)")

    async def fetch(self, entity_id: str, today: Optional[date] = None) -> List[SimpleTransaction]:
        """
        Fetch reservations followed by posted transactions for an account.

        Source order is kept within each part and reservations always come first,
        regardless of dates.

        Args:
            entity_id: Account id.
            today: End of the transaction window, defaults to the current date.

        Returns:
            Combined list; a failing source contributes no records.
        """
        records = await self._fetch_reservations(entity_id)
        records.extend(await self._fetch_transactions(entity_id, today or date.today()))
        logger.info(f"Account {entity_id}: {len(records)} reservations and transactions")
        return records

    async def _fetch_reservations(self, entity_id: str) -> List[SimpleTransaction]:
        try:
            reservations = await self.bank_connector.get_reservations(entity_id)
        except (RequestError, ParseError) as e:
            logger.error(f"Cannot get CSAS reservations for {entity_id}: {e}")
            return []

        records = []
        for reservation in reservations:
            try:
                records.append(reservation_record(reservation))
            except ParseError as e:
                logger.error(f"Skipping reservation of {entity_id}: {e}")
        logger.debug(f"Reservations: {records}")
        return records

    async def _fetch_transactions(self, entity_id: str, today: date) -> List[SimpleTransaction]:
        iban = self.entity_cache.lookup_iban(entity_id)
        if not iban:
            return []

        start = today - timedelta(days=self.history_interval)
        try:
            transactions = await self.bank_connector.get_transactions(iban, start, today)
        except (RequestError, ParseError) as e:
            logger.error(f"Cannot get CSAS transactions for {entity_id}: {e}")
            return []

        records = []
        for transaction in transactions:
            try:
                records.append(transaction_record(transaction))
            except ParseError as e:
                logger.error(f"Skipping transaction of {entity_id}: {e}")
        logger.debug(f"Transactions: {records}")
        return records
