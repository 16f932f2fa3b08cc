from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union


@dataclass(frozen=True)
class CallContext:
    """State of one inbound call, handed to the validator hook."""

    route: str
    remote_public_key: str
    params: Any = None
    headers: Dict[str, Any] = field(default_factory=dict)


Validator = Callable[[str, Dict[str, Any], CallContext], Optional[Awaitable[None]]]
HeaderSupplier = Callable[[], Union[Dict[str, Any], Any]]
