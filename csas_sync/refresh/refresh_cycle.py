"""Timer-driven refresh of all bound items."""

import asyncio
import logging
from enum import Enum
from typing import Dict

from ..auth.oauth_manager import TokenManager
from ..data.bank_connector import BankConnector
from ..data.entity_cache import EntityCache
from ..aggregator.transaction_aggregator import TransactionAggregator
from ..items.bindings import ItemRegistry
from ..items.resolver import ItemResolver, TransactionCache

logger = logging.getLogger(__name__)


class CycleState(Enum):
    IDLE = 'idle'
    AUTHENTICATING = 'authenticating'
    DISCOVERING = 'discovering'
    RESOLVING = 'resolving'


class RefreshCycle:
    """Drives authentication, one-time discovery and item resolution.

    The token manager and entity cache live for the whole activation; a new
    transaction cache is built for every resolving phase.
    """

    def __init__(
        self,
        token_manager: TokenManager,
        bank_connector: BankConnector,
        entity_cache: EntityCache,
        aggregator: TransactionAggregator,
        registry: ItemRegistry,
    ):
        self.token_manager = token_manager
        self.bank_connector = bank_connector
        self.entity_cache = entity_cache
        self.aggregator = aggregator
        self.registry = registry
        self.resolver = ItemResolver(bank_connector)
        self.state = CycleState.IDLE
        self.discovered = False

    async def run_once(self) -> Dict[str, str]:
        """
        Run a single refresh cycle.

        Returns:
            Item values published during this cycle, keyed by item name.
        """
        if not self.registry.has_bindings():
            logger.debug("There is no existing CSAS binding configuration => refresh cycle aborted!")
            return {}

        try:
            self.state = CycleState.AUTHENTICATING
            if not self.token_manager.has_access_token:
                await self.token_manager.refresh_access_token()
                if not self.token_manager.has_access_token:
                    logger.warning("No CSAS access token available, skipping this refresh cycle")
                    return {}
            else:
                await self.token_manager.refresh_access_token()

            if not self.discovered:
                await self._discover()

            self.state = CycleState.RESOLVING
            return await self._resolve_items()
        finally:
            self.state = CycleState.IDLE

    async def _discover(self) -> None:
        """Discover entities; on failure discovery is retried next cycle."""
        self.state = CycleState.DISCOVERING
        try:
            await self.bank_connector.discover_all()
        except Exception:
            logger.exception("CSAS discovery failed, retrying on the next refresh cycle")
            return
        self.discovered = True
        self.log_unbound_entities()

    async def _resolve_items(self) -> Dict[str, str]:
        transaction_cache = TransactionCache(self.aggregator)
        published = {}
        for binding in self.registry.bindings():
            try:
                new_value = await self.resolver.resolve(binding, transaction_cache)
                if self.registry.state(binding.item_name) != new_value:
                    self.registry.post_update(binding.item_name, new_value)
                    published[binding.item_name] = new_value
            except Exception:
                logger.exception(f"Cannot refresh item {binding.item_name}")
        logger.info(f"Refresh cycle complete, {len(published)} of {len(self.registry.bindings())} items updated")
        return published

    def log_unbound_entities(self) -> None:
        unbound = self.entity_cache.list_unbound(self.registry.is_bound)
        if unbound:
            lines = ''.join(f"\t{label} Id: {entity_id}\n" for entity_id, label in unbound)
            logger.info(f"Found unbound CSAS account(s): \n{lines}")

    async def run_forever(self, interval_seconds: float) -> None:
        """Run a cycle, then sleep for the interval, until cancelled."""
        logger.info(f"CSAS Refresh Service started, interval {interval_seconds}s")
        while True:
            try:
                await self.run_once()
            except Exception:
                logger.exception("Refresh cycle failed")
            await asyncio.sleep(interval_seconds)

    def deactivate(self) -> None:
        """Drop discovered entities and the access token."""
        self.entity_cache.clear()
        self.token_manager.clear()
        self.discovered = False
        logger.info("CSAS Refresh Service deactivated")
