"""Item bindings: which entity and field each named item shows."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..exceptions import BindingConfigError

logger = logging.getLogger(__name__)

DISPOSABLE_SUFFIX = 'disposable'


class ItemKind(Enum):
    BALANCE = 'BALANCE'
    DISPOSABLE_BALANCE = 'DISPOSABLE_BALANCE'
    TRANSACTION_BALANCE = 'TRANSACTION_BALANCE'
    TRANSACTION_PARTY = 'TRANSACTION_PARTY'
    TRANSACTION_INFO = 'TRANSACTION_INFO'
    TRANSACTION_VS = 'TRANSACTION_VS'
    TRANSACTION_DESCRIPTION = 'TRANSACTION_DESCRIPTION'

    @property
    def is_transaction(self) -> bool:
        return self.name.startswith('TRANSACTION_')


@dataclass(frozen=True)
class ItemBinding:
    """A named item bound to an entity field; ordinal is 1-based and used by transaction kinds only."""
    item_name: str
    entity_id: str
    kind: ItemKind
    ordinal: int = 0


def parse_binding(item_name: str, kind: Union[ItemKind, str], descriptor: str) -> ItemBinding:
    """
    Parse a binding descriptor for an item of the given kind.

    Accepted descriptors:
        '<entityId>'             plain balance
        '<entityId>#disposable'  disposable balance
        '<entityId>#<ordinal>'   transaction field at a 1-based ordinal

    Raises:
        BindingConfigError: If the descriptor does not match the kind.
    """
    if not isinstance(kind, ItemKind):
        try:
            kind = ItemKind[str(kind).strip().upper()]
        except KeyError:
            raise BindingConfigError(f"Item '{item_name}': unknown item kind '{kind}'") from None

    entity_id, sep, suffix = descriptor.strip().partition('#')
    entity_id = entity_id.strip()
    suffix = suffix.strip()
    if not entity_id:
        raise BindingConfigError(f"Item '{item_name}': descriptor '{descriptor}' has no entity id")

    if kind is ItemKind.BALANCE:
        if sep:
            raise BindingConfigError(f"Item '{item_name}': balance descriptor must be a plain entity id")
        return ItemBinding(item_name, entity_id, kind)

    if kind is ItemKind.DISPOSABLE_BALANCE:
        if suffix.lower() != DISPOSABLE_SUFFIX:
            raise BindingConfigError(f"Item '{item_name}': expected '{entity_id}#{DISPOSABLE_SUFFIX}'")
        return ItemBinding(item_name, entity_id, kind)

    try:
        ordinal = int(suffix)
    except ValueError:
        raise BindingConfigError(f"Item '{item_name}': expected '{entity_id}#<ordinal>', got '{descriptor}'") from None
    if ordinal < 1:
        raise BindingConfigError(f"Item '{item_name}': transaction ordinal must be 1 or greater")
    return ItemBinding(item_name, entity_id, kind, ordinal)


def load_bindings(path: Union[str, Path]) -> List[ItemBinding]:
    """
    Read '<item name> <KIND> <descriptor>' lines from a bindings file.

    Blank lines and lines starting with '#' are ignored.

    Raises:
        BindingConfigError: If a line is malformed.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Bindings file {path} not found, no items are bound")
        return []

    bindings = []
    for lineno, line in enumerate(path.read_text(encoding='utf-8').splitlines(), 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        parts = line.split()
        if len(parts) != 3:
            raise BindingConfigError(f"{path}:{lineno}: expected '<item name> <KIND> <descriptor>'")
        bindings.append(parse_binding(*parts))

    logger.info(f"Loaded {len(bindings)} item bindings from {path}")
    return bindings


class ItemRegistry:
    """Bound items with their last published state."""

    def __init__(self, bindings: Optional[List[ItemBinding]] = None):
        self._bindings: Dict[str, ItemBinding] = {}
        self._states: Dict[str, Optional[str]] = {}
        self._subscribers: List[Callable[[str, str], None]] = []
        for binding in bindings or []:
            self.add(binding)

    def add(self, binding: ItemBinding) -> None:
        if binding.item_name in self._bindings:
            raise BindingConfigError(f"Item '{binding.item_name}' is bound twice")
        self._bindings[binding.item_name] = binding
        self._states[binding.item_name] = None

    def bindings(self) -> List[ItemBinding]:
        return list(self._bindings.values())

    def has_bindings(self) -> bool:
        return bool(self._bindings)

    def is_bound(self, entity_id: str) -> bool:
        return any(binding.entity_id == entity_id for binding in self._bindings.values())

    def state(self, item_name: str) -> Optional[str]:
        return self._states.get(item_name)

    def subscribe(self, callback: Callable[[str, str], None]) -> None:
        self._subscribers.append(callback)

    def post_update(self, item_name: str, value: str) -> None:
        """Notify subscribers, then remember the value.

        A subscriber error propagates and leaves the previous state in place,
        so the value is published again on the next cycle.
        """
        for callback in self._subscribers:
            callback(item_name, value)
        self._states[item_name] = value
