"""In-memory cache of discovered netbanking entities."""

import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from ..exceptions import EntityLookupError

logger = logging.getLogger(__name__)


class EntityCache:
    """Maps entity ids to display labels, plus account ids to IBANs.

    Entries live for the whole process (until cleared on deactivation) and are
    never overwritten: the first writer wins.
    """

    def __init__(self):
        self._labels: Dict[str, str] = {}
        self._ibans: Dict[str, str] = {}
        self._lock = threading.Lock()

    def record_if_absent(self, entity_id: str, label: str) -> bool:
        """Store a label for an unknown id. Returns True if the entry was inserted."""
        with self._lock:
            if entity_id in self._labels:
                return False
            self._labels[entity_id] = label
        logger.debug(f"Discovered entity {entity_id}: {label}")
        return True

    def record_iban(self, entity_id: str, iban: Optional[str]) -> None:
        if not iban:
            return
        with self._lock:
            self._ibans.setdefault(entity_id, iban)

    def get_iban(self, entity_id: str) -> str:
        """
        Strict IBAN lookup.

        Raises:
            EntityLookupError: If no IBAN is known for the id.
        """
        try:
            return self._ibans[entity_id]
        except KeyError:
            raise EntityLookupError(f"No IBAN known for entity {entity_id}") from None

    def lookup_iban(self, entity_id: str) -> str:
        """IBAN of an account, empty string (logged) if unknown."""
        try:
            return self.get_iban(entity_id)
        except EntityLookupError:
            logger.error(f"Cannot get IBAN for account: {entity_id}")
            return ''

    def label(self, entity_id: str) -> Optional[str]:
        return self._labels.get(entity_id)

    def list_unbound(self, is_bound: Callable[[str], bool]) -> List[Tuple[str, str]]:
        """Entities without any bound item, in discovery order."""
        with self._lock:
            entries = list(self._labels.items())
        return [(entity_id, label) for entity_id, label in entries if not is_bound(entity_id)]

    def clear(self) -> None:
        with self._lock:
            self._labels.clear()
            self._ibans.clear()

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._labels

    def __len__(self) -> int:
        return len(self._labels)
