"""Load record bundles from JSON files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from refcompose.adapters.memory import InMemoryReferenceSetRepository

from .schema import ReferenceSetBundle
from .translator import translate_join, translate_reference, translate_reference_set

if TYPE_CHECKING:
    from refcompose.domain.ports import WritableReferenceSetRepository

log = logging.getLogger(__name__)


def read_bundle(path: Path | str) -> ReferenceSetBundle:
    """Parse and validate a bundle file (raises ``pydantic.ValidationError``)."""

    text = Path(path).read_text(encoding="utf-8")
    return ReferenceSetBundle.model_validate_json(text)


def populate_repository(
    bundle: ReferenceSetBundle,
    repository: WritableReferenceSetRepository,
) -> None:
    """Write every record of ``bundle`` into ``repository``."""

    set_ids_by_reference: dict[str, list[str]] = {}
    for set_document in bundle.reference_sets:
        repository.add_reference_set(translate_reference_set(set_document))
        members = bundle.memberships.get(set_document.id, set_document.reference_ids or [])
        for reference_id in members:
            set_ids_by_reference.setdefault(reference_id, []).append(set_document.id)

    for reference_document in bundle.references:
        repository.add_reference(
            translate_reference(reference_document),
            set_ids=set_ids_by_reference.get(reference_document.id, []),
        )

    for join_document in bundle.joins:
        repository.add_join(translate_join(join_document), set_ids=join_document.reference_set_ids)

    log.info(
        "Loaded bundle: reference_sets=%d, references=%d, joins=%d",
        len(bundle.reference_sets),
        len(bundle.references),
        len(bundle.joins),
    )


def load_bundle(path: Path | str) -> InMemoryReferenceSetRepository:
    """Read ``path`` into a fresh in-memory repository."""

    repository = InMemoryReferenceSetRepository()
    populate_repository(read_bundle(path), repository)
    return repository
