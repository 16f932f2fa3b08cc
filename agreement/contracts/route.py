"""
Route descriptors

A route is the (param, header, return) schema triple for one named
operation. Routes are immutable: ``returns`` and ``headers`` hand back a
new route, so a route can be shared between agreements safely::

    add = params({"a": float, "b": float}).returns(float)
    secure_add = add.headers({"token": str})
"""

import inspect
import typing
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from pydantic_core import core_schema

from agreement.contracts.schema import Schema
from agreement.utils.exceptions import AgreementDefinitionError

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)
_VARIADIC = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
)


@dataclass(frozen=True)
class Route:
    """Schema triple for one route.

    ``param`` always holds a schema (``Schema.nothing()`` when the route
    takes no parameters). ``header`` and ``return_`` are ``None`` when the
    route does not declare them.
    """

    param: Schema = field(default_factory=Schema.nothing)
    header: Optional[Schema] = None
    return_: Optional[Schema] = None

    def returns(self, schema: Any) -> "Route":
        """Copy of this route with a declared return schema."""
        return replace(self, return_=Schema.coerce(schema, "Returns"))

    def headers(self, shape: Any) -> "Route":
        """Copy of this route with a declared header schema."""
        return replace(self, header=Schema.coerce(shape, "Headers"))

    @property
    def takes_params(self) -> bool:
        return not self.param.is_nothing

    @classmethod
    def from_callable(cls, fn: Callable[..., Any]) -> "Route":
        """Derive a route from an annotated callable's signature.

        At most one declared parameter is allowed. No parameter resolves to
        the schema that accepts nothing; no return annotation leaves the
        return value unchecked.
        """
        try:
            signature = inspect.signature(fn)
        except (TypeError, ValueError) as e:
            raise AgreementDefinitionError(f"Cannot read signature of {fn!r}: {e}")

        try:
            hints = typing.get_type_hints(fn)
        except (NameError, TypeError):
            # unresolvable forward references fall back to Any
            hints = {}

        declared = [
            p for p in signature.parameters.values()
            if p.kind not in _VARIADIC
        ]
        if len(declared) > 1:
            raise AgreementDefinitionError(
                f"{getattr(fn, '__qualname__', fn)!r} declares {len(declared)} parameters; "
                "routes take a single parameter"
            )

        if declared:
            parameter = declared[0]
            if parameter.kind not in _POSITIONAL:
                raise AgreementDefinitionError(
                    f"Parameter '{parameter.name}' of {fn!r} must be positional"
                )
            param = Schema(hints.get(parameter.name, Any))
        else:
            param = Schema.nothing()

        return_ = None
        if signature.return_annotation is not inspect.Signature.empty:
            return_ = Schema(hints.get("return", signature.return_annotation))

        return cls(param=param, return_=return_)

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(cls)


def params(shape: Any = None) -> Route:
    """Start a route from its parameter shape (mapping, schema, annotation or nothing)."""
    return Route(param=Schema.coerce(shape, "Params"))
