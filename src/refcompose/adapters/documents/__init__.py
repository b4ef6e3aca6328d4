"""JSON document adapter."""

from __future__ import annotations

from .loader import load_bundle, populate_repository, read_bundle
from .schema import (
    JoinDocument,
    ReferenceDocument,
    ReferenceSetBundle,
    ReferenceSetDocument,
    SideDocument,
)
from .translator import (
    reference_set_to_payload,
    reference_to_payload,
    translate_join,
    translate_reference,
    translate_reference_set,
)

__all__ = [
    "JoinDocument",
    "ReferenceDocument",
    "ReferenceSetBundle",
    "ReferenceSetDocument",
    "SideDocument",
    "load_bundle",
    "populate_repository",
    "read_bundle",
    "reference_set_to_payload",
    "reference_to_payload",
    "translate_join",
    "translate_reference",
    "translate_reference_set",
]
