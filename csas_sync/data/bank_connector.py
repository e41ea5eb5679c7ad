"""Netbanking API connector: entity discovery and read-only data retrieval."""

import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..auth.oauth_manager import TokenManager
from ..exceptions import CSASError, ParseError
from .entity_cache import EntityCache

logger = logging.getLogger(__name__)

# Offset the transaction history endpoint expects on its date bounds
DATE_BOUND_SUFFIX = 'T00:00:00+01:00'


def _list_field(data: Any, field: str) -> List[Dict[str, Any]]:
    """Return a list field of a response, treating a missing or null field as empty."""
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object with '{field}', got {type(data).__name__}")
    items = data.get(field)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ParseError(f"Field '{field}' is not a list")
    return [item for item in items if isinstance(item, dict)]


def _entity_id(element: Dict[str, Any], category: str) -> Optional[str]:
    """Id of a category element, None (logged) if it is missing or not a string."""
    entity_id = element.get('id')
    if isinstance(entity_id, str) and entity_id:
        return entity_id
    logger.error(f"Skipping {category} element: {ParseError(f'invalid id {entity_id!r}')}")
    return None


def account_label(accountno: Dict[str, Any]) -> str:
    return f"Account: {accountno.get('number')}/{accountno.get('bankCode')}"


def account_iban(accountno: Dict[str, Any]) -> Optional[str]:
    return accountno.get('cz-iban') or accountno.get('iban')


class BankConnector:
    """Handles the netbanking endpoints needed to discover entities and refresh items."""

    def __init__(self, token_manager: TokenManager, entity_cache: EntityCache):
        """
        Initialize bank connector.

        Args:
            token_manager: Token manager performing authenticated requests.
            entity_cache: Process-wide cache filled by discovery.
        """
        self.token_manager = token_manager
        self.entity_cache = entity_cache

        logger.info("Bank Connector initialized")

    def _categories(self) -> List[Tuple[str, Callable[[], Awaitable[int]]]]:
        return [
            ('accounts', self._scan_accounts),
            ('cards', self._scan_cards),
            ('building savings', self._scan_building_savings),
            ('pensions', self._scan_pensions),
            ('insurances', self._scan_insurances),
            ('securities', self._scan_securities),
        ]

    async def discover_all(self) -> int:
        """
        Scan every banking category and record the entities found.

        A failing category is logged and skipped; the others still run.

        Returns:
            Number of entities newly added to the cache.
        """
        logger.info("Discovering CSAS entities...")

        discovered = 0
        for category, scan in self._categories():
            try:
                found = await scan()
                discovered += found
                logger.info(f"Scanned {category}: {found} new entities")
            except CSASError as e:
                logger.error(f"Cannot get CSAS {category}: {e}")

        logger.info(f"Discovery complete, {discovered} new entities, {len(self.entity_cache)} known")
        return discovered

    def _record_account(self, element: Dict[str, Any], category: str) -> int:
        entity_id = _entity_id(element, category)
        accountno = element.get('accountno')
        if entity_id is None or not isinstance(accountno, dict):
            return 0
        if self.entity_cache.record_if_absent(entity_id, account_label(accountno)):
            self.entity_cache.record_iban(entity_id, account_iban(accountno))
            return 1
        return 0

    async def _scan_accounts(self) -> int:
        data = await self.token_manager.authenticated_get('my/accounts')
        return sum(
            self._record_account(account, 'accounts')
            for account in _list_field(data, 'accounts')
        )

    async def _scan_cards(self) -> int:
        data = await self.token_manager.authenticated_get('my/cards')
        found = 0
        for card in _list_field(data, 'cards'):
            main_account = card.get('mainAccount')
            if isinstance(main_account, dict):
                found += self._record_account(main_account, 'cards')
        return found

    async def _scan_building_savings(self) -> int:
        data = await self.token_manager.authenticated_get('my/contracts/buildings')
        return sum(
            self._record_account(account, 'building savings')
            for account in _list_field(data, 'buildings')
        )

    async def _scan_pensions(self) -> int:
        data = await self.token_manager.authenticated_get('cz/my/contracts/pensions')
        found = 0
        for agreement in _list_field(data, 'pensions'):
            entity_id = _entity_id(agreement, 'pensions')
            if entity_id and self.entity_cache.record_if_absent(
                entity_id, f"Pension agreement: {agreement.get('agreementNumber')}"
            ):
                found += 1
        return found

    async def _scan_insurances(self) -> int:
        data = await self.token_manager.authenticated_get('my/contracts/insurances')
        found = 0
        for insurance in _list_field(data, 'insurances'):
            label = f"Insurance: {insurance.get('policyNumber')} ({insurance.get('productI18N')})"
            entity_id = _entity_id(insurance, 'insurances')
            if entity_id and self.entity_cache.record_if_absent(entity_id, label):
                found += 1
        return found

    async def _scan_securities(self) -> int:
        data = await self.token_manager.authenticated_get('my/securities')
        found = 0
        for account in _list_field(data, 'securitiesAccounts'):
            label = f"Securities account: {account.get('accountno')}"
            entity_id = _entity_id(account, 'securities')
            if entity_id and self.entity_cache.record_if_absent(entity_id, label):
                found += 1
        return found

    async def get_balance(self, entity_id: str, disposable: bool = False) -> Dict[str, Any]:
        """
        Fetch the balance (or disposable balance) amount object of an account.

        Raises:
            RequestError: If the balance endpoint fails.
            ParseError: If the requested amount object is missing.
        """
        data = await self.token_manager.authenticated_get(f'my/accounts/{entity_id}/balance')
        field = 'disposable' if disposable else 'balance'
        amount = data.get(field) if isinstance(data, dict) else None
        if not isinstance(amount, dict):
            raise ParseError(f"Balance response for {entity_id} has no '{field}'")
        return amount

    async def get_loyalty_points(self) -> Optional[str]:
        """Loyalty program points count, None if the contract reports none."""
        data = await self.token_manager.authenticated_get('cz/my/contracts/loyalty')
        points = data.get('pointsCount') if isinstance(data, dict) else None
        return None if points is None else str(points)

    async def get_reservations(self, entity_id: str) -> List[Dict[str, Any]]:
        """Pending reservations of an account in API order."""
        data = await self.token_manager.authenticated_get(f'my/accounts/{entity_id}/reservations')
        return _list_field(data, 'reservations')

    async def get_transactions(self, iban: str, start: date, end: date) -> List[Dict[str, Any]]:
        """Posted transactions of an account between two dates in API order."""
        params = {
            'dateStart': f"{start.isoformat()}{DATE_BOUND_SUFFIX}",
            'dateEnd': f"{end.isoformat()}{DATE_BOUND_SUFFIX}",
        }
        data = await self.token_manager.authenticated_get(f'cz/my/accounts/{iban}/transactions', params=params)
        return _list_field(data, 'transactions')
