"""
CSAS Sync - Česká spořitelna netbanking synchronization

This application refreshes an OAuth access token, discovers the accounts and
contracts of a netbanking user and periodically publishes item values
(balances, loyalty points, recent transactions and reservations).
"""

import asyncio
import logging
from csas_sync.auth.oauth_manager import TokenManager
from csas_sync.data.entity_cache import EntityCache
from csas_sync.data.bank_connector import BankConnector
from csas_sync.aggregator.transaction_aggregator import TransactionAggregator
from csas_sync.items.bindings import ItemRegistry, load_bindings
from csas_sync.refresh.refresh_cycle import RefreshCycle
from csas_sync.dashboard.console_display import ConsoleDisplay
from config.settings import load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


async def main():
    """Main application entry point."""
    logger.info("Starting CSAS Sync application...")

    # Load configuration
    config = load_config()
    app_config = config['app']
    logging.getLogger().setLevel('DEBUG' if app_config['debug'] else app_config['log_level'].upper())

    # Initialize components
    token_manager = TokenManager(config['csas'], config['security']['token_encryption_key'])
    entity_cache = EntityCache()
    bank_connector = BankConnector(token_manager, entity_cache)
    aggregator = TransactionAggregator(bank_connector, entity_cache, app_config['history_interval'])
    registry = ItemRegistry(load_bindings(app_config['items_file']))

    display = ConsoleDisplay()
    display.show_header()
    registry.subscribe(display.show_update)

    cycle = RefreshCycle(token_manager, bank_connector, entity_cache, aggregator, registry)
    try:
        await cycle.run_forever(app_config['refresh_interval'] / 1000)
    finally:
        cycle.deactivate()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("CSAS Sync stopped")
