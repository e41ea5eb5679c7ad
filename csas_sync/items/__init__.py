"""Items package: bindings, registry and value resolution."""

from .bindings import ItemBinding, ItemKind, ItemRegistry, load_bindings, parse_binding
from .resolver import ItemResolver, TransactionCache

__all__ = ['ItemBinding', 'ItemKind', 'ItemRegistry', 'load_bindings', 'parse_binding', 'ItemResolver', 'TransactionCache']
