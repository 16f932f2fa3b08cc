"""
Agreement loader

Resolves an agreement from a location and captures its source text next to
its serialized document, for the self-description meta-routes.

Module loading and file reading are injected: a provider turns a location
into an agreement value and a resolver turns it into source text. The
defaults import Python modules and read files from disk.
"""

import asyncio
import importlib
import importlib.util
import os
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
import structlog

from agreement.contracts.agreement_spec import Agreement, AgreementImport, normalize_agreement
from agreement.contracts.document import SerializedDocument
from agreement.publication.serializer import serialize
from agreement.utils.exceptions import AgreementDefinitionError

logger = structlog.get_logger(__name__)

AgreementProvider = Callable[[Any], Any]
SourceResolver = Callable[[Any], Optional[str]]

DEFAULT_ATTRIBUTE = "agreement"


class LoadWarning(BaseModel):
    """Why a load degraded."""

    model_config = ConfigDict(frozen=True)

    location: str = Field(..., description="The location that was loaded")
    reason: str = Field(..., description="The underlying failure")
    kind: str = Field(default="import_failed", description="Warning kind")


class LoadedAgreement(AgreementImport):
    """
    Result of loading an agreement.

    When loading succeeded this is a valid import wrapper and can be passed
    straight to the binders. After a failed import ``agreement`` holds the
    raw location, ``api`` is empty and ``warnings`` says why.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, arbitrary_types_allowed=True)

    agreement: Any = Field(..., alias="import", description="The loaded agreement")
    api: SerializedDocument = Field(..., description="Serialized document")
    source: Optional[str] = Field(None, description="Raw agreement source text")
    warnings: List[LoadWarning] = Field(default_factory=list, description="Load warnings")

    @property
    def ok(self) -> bool:
        return not self.warnings

    @classmethod
    def from_agreement(cls, agreement: Any, source: Optional[str] = None) -> "LoadedAgreement":
        agreement = normalize_agreement(agreement)
        return cls(agreement=agreement, api=serialize(agreement), source=source)


def import_agreement(location: Any, attribute: str = DEFAULT_ATTRIBUTE) -> Any:
    """Import a ``.py`` file or dotted module and return its ``agreement`` attribute."""
    path = Path(os.fspath(location))
    if path.suffix == ".py":
        if not path.is_file():
            raise FileNotFoundError(f"No agreement module at {path}")
        module_name = f"_agreement_{path.stem}_{abs(hash(str(path.resolve())))}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import agreement module from {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
    else:
        module = importlib.import_module(str(location))

    if not hasattr(module, attribute):
        raise AgreementDefinitionError(f"Module {location} defines no '{attribute}'")
    return getattr(module, attribute)


def read_source(location: Any) -> Optional[str]:
    """Read the text behind a file path or dotted module name."""
    path = Path(os.fspath(location))
    if not path.is_file():
        try:
            spec = importlib.util.find_spec(str(location))
        except (ImportError, ValueError):
            return None
        if spec is None or not spec.origin or not os.path.isfile(spec.origin):
            return None
        path = Path(spec.origin)
    return path.read_text(encoding="utf-8")


async def load(
    location: Any,
    provider: Optional[AgreementProvider] = None,
    resolver: Optional[SourceResolver] = None,
) -> LoadedAgreement:
    """
    Load an agreement and describe it.

    Args:
        location: Path, dotted module name, or an already built agreement
        provider: Turns a location into an agreement value
        resolver: Turns a location into source text

    Returns:
        Loaded agreement. Import failures do not raise; they degrade the
        result and are reported in ``warnings``.
    """
    if not isinstance(location, (str, os.PathLike)):
        return LoadedAgreement.from_agreement(location)

    provider = provider or import_agreement
    resolver = resolver or read_source

    imported, source = await asyncio.gather(
        asyncio.to_thread(provider, location),
        asyncio.to_thread(resolver, location),
        return_exceptions=True,
    )

    if isinstance(source, BaseException):
        logger.warning("Failed to read agreement source", location=str(location), error=str(source))
        source = None

    warnings: List[LoadWarning] = []
    try:
        if isinstance(imported, BaseException):
            raise imported
        agreement = normalize_agreement(imported)
        api = serialize(agreement)
    except Exception as e:
        logger.error("Failed to load agreement", location=str(location), error=str(e))
        warnings.append(LoadWarning(location=str(location), reason=str(e) or type(e).__name__))
        agreement = location
        api = SerializedDocument.empty()

    loaded = LoadedAgreement(agreement=agreement, api=api, source=source, warnings=warnings)
    if loaded.ok:
        logger.info(
            "Agreement loaded",
            location=str(location),
            role=api.role,
            version=api.version,
            routes=len(api.routes),
        )
    return loaded


def load_agreement(
    location: Any,
    provider: Optional[AgreementProvider] = None,
    resolver: Optional[SourceResolver] = None,
) -> LoadedAgreement:
    """Synchronous ``load`` for callers outside an event loop."""
    return asyncio.run(load(location, provider, resolver))
