"""Self-description meta-routes and the ``enact`` entry point."""

from typing import Any, List, Optional

import structlog

from agreement.binders.context import Validator
from agreement.binders.diagnostics import BindingReport, Observer
from agreement.binders.server import implement
from agreement.channel.protocol import Channel, ensure_channel
from agreement.publication.loader import LoadedAgreement
from agreement.utils.settings import get_settings

logger = structlog.get_logger(__name__)


def add_meta_routes(
    channel: Channel,
    loaded: LoadedAgreement,
    swag_path: Optional[str] = None,
    source_path: Optional[str] = None,
) -> List[str]:
    """
    Publish an agreement's document and source as two unversioned methods.

    Returns:
        The two registered paths, document first
    """
    ensure_channel(channel)
    settings = get_settings()
    swag_path = swag_path or settings.swag_path
    source_path = source_path or settings.source_path

    document = loaded.api.to_dict()
    source = loaded.source

    async def swag(payload: Any = None) -> Any:
        return document

    async def agreement_source(payload: Any = None) -> Optional[str]:
        return source

    channel.register_method(swag_path, swag)
    channel.register_method(source_path, agreement_source)

    logger.info(
        "Meta routes registered",
        role=loaded.api.role,
        swag_path=swag_path,
        source_path=source_path,
        has_source=source is not None,
    )
    return [swag_path, source_path]


def enact(
    channel: Channel,
    loaded: Any,
    implementations: Any,
    validator: Optional[Validator] = None,
    *,
    swag_path: Optional[str] = None,
    source_path: Optional[str] = None,
    observer: Optional[Observer] = None,
    prefix: Optional[str] = None,
) -> BindingReport:
    """
    Implement an agreement, then advertise it.

    The meta-routes are only registered once every route bound, so a
    failed binding never publishes a description.
    """
    if not isinstance(loaded, LoadedAgreement):
        loaded = LoadedAgreement.from_agreement(loaded)

    report = implement(
        channel,
        loaded,
        implementations,
        validator,
        observer=observer,
        prefix=prefix,
    )
    report.meta_paths = add_meta_routes(channel, loaded, swag_path, source_path)
    return report
