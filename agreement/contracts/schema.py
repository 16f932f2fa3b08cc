"""
Schema wrapper

Routes describe their parameters, headers and return values with plain
Python type annotations (``int``, ``List[str]``, pydantic models, ...). A
``Schema`` pairs such an annotation with a pydantic ``TypeAdapter`` so the
binders can validate values and the serializer can describe them.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import TypeAdapter, create_model

NoneType = type(None)


class Schema:
    """A validating, describable schema over a type annotation."""

    __slots__ = ("annotation", "_adapter")

    def __init__(self, annotation: Any):
        if isinstance(annotation, Schema):
            annotation = annotation.annotation
        if annotation is None:
            annotation = NoneType
        self.annotation = annotation
        self._adapter = TypeAdapter(annotation)

    @classmethod
    def nothing(cls) -> "Schema":
        """The schema that accepts only ``None``."""
        return NOTHING

    @classmethod
    def record(cls, shape: Mapping[str, Any], name: str = "Record") -> "Schema":
        """Build a record schema from a mapping of field name to annotation.

        Values may be annotations, ``Schema`` instances or
        ``(annotation, default)`` tuples.
        """
        fields = {}
        for key, value in shape.items():
            if isinstance(value, Schema):
                fields[key] = (value.annotation, ...)
            elif isinstance(value, tuple) and len(value) == 2:
                fields[key] = value
            else:
                fields[key] = (value, ...)
        return cls(create_model(name, **fields))

    @classmethod
    def coerce(cls, shape: Any = None, name: str = "Record") -> "Schema":
        """Normalize a route shape: nothing, a Schema, a mapping, or an annotation."""
        if shape is None:
            return NOTHING
        if isinstance(shape, Schema):
            return shape
        if isinstance(shape, Mapping):
            return cls.record(shape, name)
        return cls(shape)

    @property
    def is_nothing(self) -> bool:
        return self.annotation is NoneType

    def validate(self, value: Any) -> Any:
        """Validate ``value``; raises ``pydantic.ValidationError``."""
        return self._adapter.validate_python(value)

    def dump(self, value: Any) -> Any:
        """JSON-compatible form of an already validated value."""
        return self._adapter.dump_python(value, mode="json")

    def json_schema(self) -> Dict[str, Any]:
        return self._adapter.json_schema()

    def __repr__(self) -> str:
        name = getattr(self.annotation, "__name__", None) or repr(self.annotation)
        return f"Schema({name})"


NOTHING = Schema(NoneType)


def describe(schema: Optional[Schema]) -> Optional[Dict[str, Any]]:
    """Portable JSON-schema tree for ``schema``; ``None`` when absent."""
    if schema is None:
        return None
    return schema.json_schema()
