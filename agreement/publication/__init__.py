"""Agreement self-description: serialization, loading and meta-routes."""

from agreement.publication.serializer import dump_document, serialize
from agreement.publication.loader import (
    AgreementProvider,
    LoadedAgreement,
    LoadWarning,
    SourceResolver,
    import_agreement,
    load,
    load_agreement,
    read_source,
)
from agreement.publication.meta_routes import add_meta_routes, enact

__all__ = [
    "serialize",
    "dump_document",
    "AgreementProvider",
    "LoadedAgreement",
    "LoadWarning",
    "SourceResolver",
    "import_agreement",
    "load",
    "load_agreement",
    "read_source",
    "add_meta_routes",
    "enact",
]
