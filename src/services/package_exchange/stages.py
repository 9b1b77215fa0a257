"""
Generic import stage: applies one package file to the database.

One stage class serves every entity type; the descriptor supplies the
columns, the natural key and the merge policy:

- UPSERT (masters, headers): match by natural key, insert or update.
  Blank cells never overwrite stored values.
- FINGERPRINT (lines, links, events): never update; a row whose defining
  values match an existing row is skipped.

Each row runs inside its own SAVEPOINT, so a failing row leaves nothing
behind and the stage moves on. The caller commits the stage.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from sqlalchemy.orm import Session

from src.services.exceptions import MissingRequiredField, UnresolvedReference
from src.services.logging_utils import get_service_logger, log_operation
from .descriptors import EntityDescriptor, Field, MergePolicy, Reference, Requirement
from .key_directory import KeyDirectory, composite_key
from .records import CsvTable, Record
from .results import StageCounts

logger = get_service_logger(__name__)

INSERTED = "inserted"
UPDATED = "updated"


class _SkipRow(Exception):
    """Row is ignored without counting as an error."""


@dataclass
class PendingReference:
    """A deferred reference waiting for its target stage."""

    descriptor: EntityDescriptor
    reference: Reference
    entity_id: int
    raw_key: str
    counts: StageCounts

    @property
    def trigger(self) -> str:
        """Entity type whose completed stage allows resolution."""
        return self.reference.resolve_after or self.descriptor.entity_type


@dataclass
class _Applied:
    outcome: str
    entity: Any
    key: Optional[str] = None
    fingerprint: Optional[str] = None
    deferred: Dict[Reference, str] = field(default_factory=dict)


class ImportStage:
    """
    Applies the rows of one package file.

    Args:
        session: Open session; rows are flushed, not committed
        descriptor: Entity descriptor of the file
        directory: Natural-key directory, updated as rows are inserted
    """

    def __init__(self, session: Session, descriptor: EntityDescriptor, directory: KeyDirectory):
        self.session = session
        self.descriptor = descriptor
        self.directory = directory
        self.counts = StageCounts(descriptor.entity_type, descriptor.file_name)
        self.pending: List[PendingReference] = []
        self._fingerprints: Set[str] = set()

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self, table: CsvTable) -> StageCounts:
        """Process every data record of the table and return the stage counters."""
        if self.descriptor.merge_policy == MergePolicy.FINGERPRINT:
            self._load_fingerprints()

        for record in table.records():
            try:
                with self.session.begin_nested():
                    applied = self._apply(record)
            except _SkipRow as skip:
                self.counts.add_skip()
                self._log_row(record, "skipped", str(skip))
                continue
            except Exception as e:
                # Covers driver errors SQLAlchemy does not wrap, e.g. OverflowError
                self.counts.add_error()
                self._log_row(record, "error", str(e))
                continue

            self._register(applied)

        return self.counts

    def _apply(self, record: Record) -> _Applied:
        if self.descriptor.merge_policy == MergePolicy.UPSERT:
            return self._upsert(record)
        return self._append(record)

    def _register(self, applied: _Applied) -> None:
        entity_type = self.descriptor.entity_type
        if applied.outcome == INSERTED:
            self.counts.add_inserted()
            if applied.key is not None:
                self.directory.add(entity_type, applied.key, applied.entity.id)
        else:
            self.counts.add_updated()

        if applied.fingerprint is not None:
            self._fingerprints.add(applied.fingerprint)

        for reference, raw_key in applied.deferred.items():
            self.pending.append(
                PendingReference(self.descriptor, reference, applied.entity.id, raw_key, self.counts)
            )

    def _log_row(self, record: Record, outcome: str, message: str) -> None:
        log_operation(
            logger,
            operation="import_row",
            outcome=outcome,
            level=logging.DEBUG,
            entity=self.descriptor.entity_type,
            package_file=self.descriptor.file_name,
            row_number=record.row_number,
            error=message,
        )

    # ------------------------------------------------------------------
    # Merge policies
    # ------------------------------------------------------------------

    def _upsert(self, record: Record) -> _Applied:
        descriptor = self.descriptor
        key = self._incoming_key(record)
        if key is None:
            raise _SkipRow("blank natural key")

        self._check_anchors(record)
        values = self._read_fields(record)
        references = self._resolve_references(record)

        entity_id = self.directory.resolve(descriptor.entity_type, key)
        entity = self.session.get(descriptor.model, entity_id) if entity_id is not None else None

        if entity is None:
            self._check_required(values)
            entity = descriptor.model()
            outcome = INSERTED
            for name, value in values.items():
                setattr(entity, name, value)
            self.session.add(entity)
        else:
            outcome = UPDATED
            # The stored key keeps its spelling; everything else is overwritten
            key_attrs = {c.attr for c in descriptor.key_columns}
            for name, value in values.items():
                if name not in key_attrs:
                    setattr(entity, name, value)

        for name, value in references.items():
            setattr(entity, name, value)

        self.session.flush()
        return _Applied(outcome, entity, key=key, deferred=self._deferred_keys(record))

    def _append(self, record: Record) -> _Applied:
        descriptor = self.descriptor
        self._check_anchors(record)
        values = self._read_fields(record)
        references = self._resolve_references(record)
        self._check_required(values)

        entity = descriptor.model()
        for f in descriptor.fields:
            value = values.get(f.attr)
            if value is None:
                value = self._default_for(f)
            setattr(entity, f.attr, value)
        for name, value in references.items():
            setattr(entity, name, value)

        fingerprint = descriptor.fingerprint_of(entity)
        if fingerprint in self._fingerprints:
            raise _SkipRow("already present")

        self.session.add(entity)
        self.session.flush()
        return _Applied(INSERTED, entity, fingerprint=fingerprint, deferred=self._deferred_keys(record))

    def _load_fingerprints(self) -> None:
        self._fingerprints = {
            self.descriptor.fingerprint_of(entity)
            for entity in self.session.query(self.descriptor.model)
        }

    # ------------------------------------------------------------------
    # Row helpers
    # ------------------------------------------------------------------

    def _incoming_key(self, record: Record) -> Optional[str]:
        parts = []
        for column in self.descriptor.key_columns:
            raw = column.raw(record)
            if raw is None:
                return None
            parts.append(raw)
        return composite_key(*parts)

    def _check_anchors(self, record: Record) -> None:
        """Skip rows missing what makes them meaningful."""
        for f in self.descriptor.fields:
            if f.requirement == Requirement.ANCHOR and f.raw(record) is None:
                raise _SkipRow(f"blank {f.header}")

        for ref in self.descriptor.references:
            if ref.requirement == Requirement.OPTIONAL or ref.deferred:
                continue
            raw = ref.raw(record)
            if raw is None:
                raise _SkipRow(f"blank {ref.header}")
            if ref.requirement == Requirement.ANCHOR and self.directory.resolve(ref.target, raw) is None:
                raise _SkipRow(f"{ref.target} '{raw}' not found")

    def _read_fields(self, record: Record) -> Dict[str, Any]:
        """Parsed non-blank cells by attribute name."""
        values = {}
        for f in self.descriptor.fields:
            value = f.read(record)
            if value is not None:
                values[f.attr] = value
        return values

    def _resolve_references(self, record: Record) -> Dict[str, int]:
        """Resolved non-deferred references by attribute name; unresolved optional ones are left out."""
        resolved = {}
        for ref in self.descriptor.references:
            if ref.deferred:
                continue
            raw = ref.raw(record)
            if raw is None:
                continue
            target_id = self.directory.resolve(ref.target, raw)
            if target_id is None:
                if ref.requirement == Requirement.MANDATORY:
                    raise UnresolvedReference(self.descriptor.entity_type, ref.target, raw)
                log_operation(
                    logger,
                    operation="resolve_reference",
                    outcome="unresolved",
                    level=logging.DEBUG,
                    entity=self.descriptor.entity_type,
                    target=ref.target,
                    key=raw,
                )
                continue
            resolved[ref.attr] = target_id
        return resolved

    def _check_required(self, values: Dict[str, Any]) -> None:
        for f in self.descriptor.fields:
            if f.requirement == Requirement.MANDATORY and f.attr not in values:
                raise MissingRequiredField(self.descriptor.entity_type, f.header)

    def _deferred_keys(self, record: Record) -> Dict[Reference, str]:
        keys = {}
        for ref in self.descriptor.deferred_references:
            raw = ref.raw(record)
            if raw is not None:
                keys[ref] = raw
        return keys

    def _default_for(self, f: Field) -> Any:
        """Value a blank cell takes on insert, matching what the database would store."""
        if f.default is not None:
            return f.default() if callable(f.default) else f.default
        column = self.descriptor.model.__table__.c.get(f.attr)
        if column is not None and column.default is not None and column.default.is_scalar:
            return column.default.arg
        return None


def resolve_pending(
    session: Session,
    directory: KeyDirectory,
    pending: List[PendingReference],
) -> int:
    """
    Apply deferred references whose target stage has completed.

    Unresolvable keys leave the reference unset; they are not errors.

    Returns:
        Number of references set
    """
    resolved = 0
    for job in pending:
        target_id = directory.resolve(job.reference.target, job.raw_key)
        if target_id is None:
            log_operation(
                logger,
                operation="resolve_deferred",
                outcome="unresolved",
                level=logging.DEBUG,
                entity=job.descriptor.entity_type,
                target=job.reference.target,
                key=job.raw_key,
            )
            continue
        entity = session.get(job.descriptor.model, job.entity_id)
        if entity is None:
            continue
        setattr(entity, job.reference.attr, target_id)
        job.counts.deferred_resolved += 1
        resolved += 1
    return resolved
