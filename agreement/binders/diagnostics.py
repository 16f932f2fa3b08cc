"""Binding diagnostics and reports."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import structlog

logger = structlog.get_logger(__name__)


class DiagnosticKind(Enum):
    """Diagnostic kinds."""
    MISSING_IMPLEMENTATION = "missing_implementation"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal finding made while binding an agreement."""

    kind: DiagnosticKind
    role: str
    version: str
    route: str
    message: str


Observer = Callable[[Diagnostic], None]


@dataclass
class BindingReport:
    """What a server binding registered on its channel."""

    role: str
    version: str
    registered: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    meta_paths: List[str] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        return [
            d.route for d in self.diagnostics
            if d.kind is DiagnosticKind.MISSING_IMPLEMENTATION
        ]


def emit(diagnostic: Diagnostic, observer: Optional[Observer] = None) -> None:
    """Log a diagnostic and hand it to the host's observer, if any."""
    logger.warning(
        diagnostic.message,
        kind=diagnostic.kind.value,
        role=diagnostic.role,
        version=diagnostic.version,
        route=diagnostic.route,
    )
    if observer is not None:
        observer(diagnostic)
