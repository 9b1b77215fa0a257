"""
Natural-key directory: translation between surrogate IDs and natural keys.

Export uses it to turn every foreign key into the referenced row's natural
key; import uses it to turn natural keys back into local IDs. Keys are
matched case-insensitively and after trimming; the original spelling is
kept for the reverse lookup.

Usage:
    directory = KeyDirectory()
    directory.add("Client", "C001", 7)
    directory.resolve("Client", " c001 ")   # -> 7
    directory.key_for("Client", 7)          # -> "C001"
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from .descriptors import EntityDescriptor

KEY_SEPARATOR = "|"


def composite_key(*parts: Any) -> str:
    """
    Join key parts into a composite natural key.

    Example:
        >>> composite_key("FATTURA", " 12/2024 ")
        'FATTURA|12/2024'
    """
    return KEY_SEPARATOR.join("" if p is None else str(p).strip() for p in parts)


def _lookup_form(key: str) -> str:
    return key.strip().casefold()


class KeyDirectory:
    """Per-entity-type maps key -> id and id -> key."""

    def __init__(self):
        self._by_key: Dict[str, Dict[str, int]] = {}
        self._by_id: Dict[str, Dict[int, str]] = {}

    def add(self, entity_type: str, key: Optional[str], entity_id: Optional[int]) -> None:
        """Register a row. Blank keys and missing IDs are ignored; an existing key is kept."""
        if key is None or entity_id is None or not key.strip():
            return
        by_key = self._by_key.setdefault(entity_type, {})
        by_key.setdefault(_lookup_form(key), entity_id)
        self._by_id.setdefault(entity_type, {})[entity_id] = key.strip()

    def resolve(self, entity_type: str, key: Optional[str]) -> Optional[int]:
        """Local ID for a natural key, or None when blank or unknown."""
        if key is None or not key.strip():
            return None
        return self._by_key.get(entity_type, {}).get(_lookup_form(key))

    def key_for(self, entity_type: str, entity_id: Optional[int]) -> Optional[str]:
        """Natural key of a row, or None when the ID is null or unknown."""
        if entity_id is None:
            return None
        return self._by_id.get(entity_type, {}).get(entity_id)

    def keys(self, entity_type: str) -> List[str]:
        """Registered keys of one type, in original spelling."""
        return list(self._by_id.get(entity_type, {}).values())

    def clear(self, entity_type: str) -> None:
        self._by_key.pop(entity_type, None)
        self._by_id.pop(entity_type, None)

    def refresh(self, session: Session, descriptor: "EntityDescriptor") -> int:
        """
        Reload the keys of one entity type from the database.

        Rows are read in ID order, so when two rows share a key (ignoring
        case) the older one wins. Types without a natural key are left
        empty. Parent types must already be loaded for line types, whose
        key embeds the parent's key.

        Returns:
            Number of keys registered
        """
        self.clear(descriptor.entity_type)
        if not descriptor.is_keyed:
            return 0

        count = 0
        for entity in session.query(descriptor.model).order_by(descriptor.model.id):
            key = descriptor.natural_key(entity, self)
            if key is None:
                continue
            self.add(descriptor.entity_type, key, entity.id)
            count += 1
        return count

    def __contains__(self, entity_type: str) -> bool:
        return bool(self._by_id.get(entity_type))
