"""
Soft-failure channel for the extraction pipeline.

Every stage receives an ExtractionDiagnostics and records what it could not
find instead of raising. Events are logged as they are recorded and kept in
order so callers and tests can inspect them after a run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)


class DiagnosticKind(str, Enum):
    SECTION_NOT_FOUND = "section_not_found"
    SECTION_REJECTED = "section_rejected"
    FIELD_EXTRACTION_MISS = "field_extraction_miss"
    MALFORMED_NUMBER = "malformed_number"
    OWNER_ID_FALLBACK = "owner_id_fallback"
    OWNER_ID_MISMATCH = "owner_id_mismatch"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: DiagnosticKind
    stage: str
    target: str = ""
    context: Dict[str, Any] = field(default_factory=dict)


class ExtractionDiagnostics:
    """Ordered, append-only list of soft extraction events"""

    def __init__(self, bound: Optional[Dict[str, Any]] = None):
        self._events: List[DiagnosticEvent] = []
        self._bound = dict(bound or {})

    @property
    def events(self) -> List[DiagnosticEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def bind(self, **context: Any) -> "ExtractionDiagnostics":
        """Child collector whose events carry extra context (e.g. account index)"""
        return ExtractionDiagnostics({**self._bound, **context})

    def record(self, kind: DiagnosticKind, stage: str, target: str = "", **context: Any) -> None:
        event = DiagnosticEvent(
            kind=kind,
            stage=stage,
            target=target,
            context={**self._bound, **context},
        )
        self._events.append(event)
        logger.debug(kind.value, stage=stage, target=target, **event.context)

    def miss(self, stage: str, target: str, **context: Any) -> None:
        self.record(DiagnosticKind.FIELD_EXTRACTION_MISS, stage, target, **context)

    def merge(self, other: "ExtractionDiagnostics") -> None:
        """Append another collector's events without logging them a second time"""
        self._events.extend(other._events)

    def of_kind(self, kind: DiagnosticKind) -> List[DiagnosticEvent]:
        return [e for e in self._events if e.kind == kind]

    def summary(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for event in self._events:
            counts[event.kind.value] = counts.get(event.kind.value, 0) + 1
        return counts
