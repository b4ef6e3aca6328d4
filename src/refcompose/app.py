"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from refcompose.adapters.documents import load_bundle, populate_repository, read_bundle
from refcompose.adapters.sqlalchemy import SqlAlchemyUnitOfWork, is_started, startup
from refcompose.config import CompositionConfig, get_composition_config
from refcompose.domain.composition import CancellationToken, CompositionEngine

if TYPE_CHECKING:
    from pathlib import Path

    from refcompose.domain.composition import ResolvedReferenceSet
    from refcompose.domain.ports import ReferenceSetRepository

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportResult:
    reference_sets: int
    references: int
    joins: int


def _effective_config(strict: bool | None, timeout: float | None) -> CompositionConfig:
    config = get_composition_config()
    return CompositionConfig(
        strict_checksums=config.strict_checksums if strict is None else strict,
        resolve_timeout=config.resolve_timeout if timeout is None else timeout,
    )


def _verify(
    repository: ReferenceSetRepository,
    set_ids: list[str],
    config: CompositionConfig,
) -> list[ResolvedReferenceSet]:
    engine = CompositionEngine.for_repository(repository, strict=config.strict_checksums)
    return [
        engine.build_resolved_view(
            set_id, cancellation=CancellationToken(timeout=config.resolve_timeout)
        )
        for set_id in set_ids
    ]


def verify_document(
    path: Path | str,
    set_ids: list[str] | None = None,
    *,
    strict: bool | None = None,
    timeout: float | None = None,
) -> list[ResolvedReferenceSet]:
    """Verify reference sets from a JSON bundle (all of them when ``set_ids`` is empty)."""

    config = _effective_config(strict, timeout)
    repository = load_bundle(path)
    targets = list(set_ids or repository.reference_set_ids)
    log.info("Verifying %d reference set(s) from %s", len(targets), path)
    return _verify(repository, targets, config)


def import_document(
    path: Path | str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportResult:
    """Store every record of a JSON bundle in the configured database."""

    if not is_started():
        startup()
    bundle = read_bundle(path)
    effective_uow = unit_of_work_factory or SqlAlchemyUnitOfWork
    with effective_uow() as uow:
        populate_repository(bundle, uow.reference_sets)
        uow.commit()

    result = ImportResult(
        reference_sets=len(bundle.reference_sets),
        references=len(bundle.references),
        joins=len(bundle.joins),
    )
    log.info(
        "Imported %s: reference_sets=%s, references=%s, joins=%s",
        path,
        result.reference_sets,
        result.references,
        result.joins,
    )
    return result


def verify_stored(
    set_ids: list[str],
    *,
    strict: bool | None = None,
    timeout: float | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[ResolvedReferenceSet]:
    """Verify reference sets stored in the configured database."""

    if not is_started():
        startup()
    config = _effective_config(strict, timeout)
    effective_uow = unit_of_work_factory or SqlAlchemyUnitOfWork
    with effective_uow() as uow:
        return _verify(uow.reference_sets, set_ids, config)
