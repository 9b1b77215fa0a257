"""
Entity descriptors for the migration package.

A descriptor tells the generic export and import stages everything they need
about one entity type: its package file, its model, its columns (plain
fields and natural-key references, in file order), which columns form the
natural key, and which attributes define a fingerprint.

Column requirements drive the row outcome on import:

    Field  MANDATORY  blank on create        -> Error
    Field  ANCHOR     blank                  -> Skipped
    Ref    MANDATORY  blank                  -> Skipped
                      present, unresolvable  -> Error
    Ref    ANCHOR     blank or unresolvable  -> Skipped
    Ref    OPTIONAL   blank or unresolvable  -> left untouched
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from sqlalchemy.orm import Session

from .key_directory import KEY_SEPARATOR, KeyDirectory, composite_key
from .records import Record
from .values import TEXT, fingerprint_part, format_value, parse_value


# ============================================================================
# Enums
# ============================================================================


class Requirement(str, Enum):
    """How strictly a column must be present on import."""

    OPTIONAL = "optional"
    MANDATORY = "mandatory"
    ANCHOR = "anchor"  # Row is meaningless without it


class MergePolicy(str, Enum):
    """How an incoming row is matched against existing rows."""

    UPSERT = "upsert"
    FINGERPRINT = "fingerprint"


class EntityCategory(str, Enum):
    """Entity categories of the relational snapshot."""

    MASTER = "master"
    HEADER = "header"
    LINE = "line"
    LINK = "link"
    EVENT = "event"

    @property
    def merge_policy(self) -> MergePolicy:
        if self in (EntityCategory.MASTER, EntityCategory.HEADER):
            return MergePolicy.UPSERT
        return MergePolicy.FINGERPRINT


# ============================================================================
# Columns
# ============================================================================


@dataclass(frozen=True)
class Field:
    """
    A plain value column.

    Attributes:
        header: Column header written on export
        attr: Model attribute
        kind: Value kind (see values module)
        aliases: Other headers accepted on import
        requirement: OPTIONAL, MANDATORY or ANCHOR
        default: Value (or callable producing it) used for fingerprint
            entities when the cell is blank; the column default otherwise
        is_key: Part of the natural key
    """

    header: str
    attr: str
    kind: str = TEXT
    aliases: Tuple[str, ...] = ()
    requirement: Requirement = Requirement.OPTIONAL
    default: Any = None
    is_key: bool = False

    def raw(self, record: Record) -> Optional[str]:
        return record.get(self.header, *self.aliases)

    def read(self, record: Record) -> Any:
        """Parsed cell value, None when blank. Raises ValueError when unreadable."""
        return parse_value(self.kind, self.raw(record))

    def export(self, entity: Any, directory: KeyDirectory) -> Optional[str]:
        return format_value(self.kind, getattr(entity, self.attr))

    def key_part(self, entity: Any, directory: KeyDirectory) -> Optional[str]:
        return self.export(entity, directory)


@dataclass(frozen=True)
class Reference:
    """
    A foreign key column written as the referenced row's natural key.

    Attributes:
        header: Column header written on export
        attr: Model foreign key attribute
        target: Entity type of the referenced row
        requirement: OPTIONAL, MANDATORY or ANCHOR
        scope_header: For references to line types, the column holding the
            parent key; the cell carries only the line number when the line
            belongs to that parent, the full line key otherwise
        deferred: Resolved in a later pass, once `resolve_after` (or this
            entity's own stage) has been committed
        resolve_after: Entity type whose stage must complete first
        aliases: Other headers accepted on import
        is_key: Part of the natural key (the parent of a line)
    """

    header: str
    attr: str
    target: str
    requirement: Requirement = Requirement.OPTIONAL
    scope_header: Optional[str] = None
    deferred: bool = False
    resolve_after: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    is_key: bool = False

    def raw(self, record: Record) -> Optional[str]:
        """Natural key named by the row, or None when blank."""
        value = record.get(self.header, *self.aliases)
        if value is None:
            return None
        if self.scope_header and KEY_SEPARATOR not in value:
            scope = record.get(self.scope_header)
            if scope is None:
                return None
            return composite_key(scope, value)
        return value

    def export(self, entity: Any, directory: KeyDirectory) -> Optional[str]:
        return directory.key_for(self.target, getattr(entity, self.attr))

    def scoped_cell(self, key: Optional[str], scope: Optional[str]) -> Optional[str]:
        """
        Cell text of a scoped reference.

        The bare line number when the line belongs to the row's own
        `scope_header` key; the full line key otherwise, so that a line of
        another (or no) parent still resolves on import.
        """
        if key is None:
            return None
        parent, _, number = key.rpartition(KEY_SEPARATOR)
        return number if parent == scope else key

    def key_part(self, entity: Any, directory: KeyDirectory) -> Optional[str]:
        return directory.key_for(self.target, getattr(entity, self.attr))


Column = Union[Field, Reference]


# ============================================================================
# Descriptor
# ============================================================================


@dataclass
class EntityDescriptor:
    """
    Everything the generic stages need to know about one entity type.

    Attributes:
        entity_type: Entity type name (used as directory namespace)
        file_name: Package file name
        model: SQLAlchemy model class
        category: Entity category, which selects the merge policy
        columns: Fields and references in file order
        fingerprint: Model attributes defining a fingerprint row
        after_stage: Hook called with the session once the stage committed
    """

    entity_type: str
    file_name: str
    model: type
    category: EntityCategory
    columns: Sequence[Column]
    fingerprint: Tuple[str, ...] = ()
    after_stage: Optional[Callable[[Session], None]] = None
    key_columns: List[Column] = field(init=False)

    def __post_init__(self):
        self.key_columns = [c for c in self.columns if c.is_key]

    @property
    def merge_policy(self) -> MergePolicy:
        return self.category.merge_policy

    @property
    def is_keyed(self) -> bool:
        """True when rows of this type have a natural key."""
        return bool(self.key_columns)

    @property
    def header(self) -> List[str]:
        return [c.header for c in self.columns]

    @property
    def fields(self) -> List[Field]:
        return [c for c in self.columns if isinstance(c, Field)]

    @property
    def references(self) -> List[Reference]:
        return [c for c in self.columns if isinstance(c, Reference)]

    @property
    def deferred_references(self) -> List[Reference]:
        return [r for r in self.references if r.deferred]

    def natural_key(self, entity: Any, directory: KeyDirectory) -> Optional[str]:
        """
        Natural key of a stored row, or None when it has none.

        A line's key is its parent's key plus the line number, so the parent
        type must already be in the directory.
        """
        if not self.key_columns:
            return None
        parts = []
        for column in self.key_columns:
            part = column.key_part(entity, directory)
            if part is None or not part.strip():
                return None
            parts.append(part)
        return composite_key(*parts)

    def export_row(self, entity: Any, directory: KeyDirectory) -> List[Optional[str]]:
        cells = {c.header: c.export(entity, directory) for c in self.columns}
        for ref in self.references:
            if ref.scope_header:
                cells[ref.header] = ref.scoped_cell(cells[ref.header], cells.get(ref.scope_header))
        return [cells[c.header] for c in self.columns]

    def fingerprint_of(self, entity: Any) -> str:
        """Case-insensitive fingerprint over the defining attributes."""
        return "|".join(fingerprint_part(getattr(entity, a)) for a in self.fingerprint).casefold()

    def __repr__(self) -> str:
        return f"EntityDescriptor({self.entity_type!r}, {self.file_name!r})"
