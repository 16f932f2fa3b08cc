"""Agreement serialization for self-description and out-of-band publication."""

import json
from typing import Any, Optional

import yaml

from agreement.contracts.agreement_spec import normalize_agreement
from agreement.contracts.document import RouteDocument, SerializedDocument
from agreement.contracts.schema import describe


def serialize(agreement: Any, description: Optional[str] = None) -> SerializedDocument:
    """
    Describe an agreement's routes as portable JSON-schema trees.

    Args:
        agreement: Agreement, import wrapper, or mapping of either
        description: Overrides the agreement's own description

    Returns:
        Serialized document; routes keep the agreement's insertion order
    """
    agreement = normalize_agreement(agreement)
    routes = [
        RouteDocument(
            name=name,
            param_schema=describe(route.param),
            header_schema=describe(route.header),
            return_schema=describe(route.return_),
        )
        for name, route in agreement.routes.items()
    ]
    return SerializedDocument(
        role=agreement.role,
        version=agreement.version,
        description=description if description is not None else agreement.description,
        routes=routes,
    )


def dump_document(document: SerializedDocument, fmt: str = "json") -> str:
    """Render a document as JSON or YAML text."""
    data = document.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False)
    raise ValueError(f"Unsupported document format: {fmt}")
