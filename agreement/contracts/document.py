"""Serialized agreement documents published for out-of-band consumers."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RouteDocument(BaseModel):
    """Portable description of one route."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Route name")
    param_schema: Optional[Dict[str, Any]] = Field(None, description="JSON schema of the parameter")
    header_schema: Optional[Dict[str, Any]] = Field(None, description="JSON schema of the headers")
    return_schema: Optional[Dict[str, Any]] = Field(None, description="JSON schema of the return value")

    def to_dict(self) -> Dict[str, Any]:
        """JSON form; undeclared schemas are left out rather than emitted as null."""
        data: Dict[str, Any] = {"name": self.name}
        for field_name in ("param_schema", "header_schema", "return_schema"):
            value = getattr(self, field_name)
            if value is not None:
                data[to_camel(field_name)] = value
        return data


class SerializedDocument(BaseModel):
    """Portable description of a whole agreement."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="The role the service provides")
    version: str = Field(..., description="Agreement version")
    description: Optional[str] = Field(None, description="Human readable summary")
    routes: List[RouteDocument] = Field(default_factory=list, description="Route descriptions")

    @classmethod
    def empty(cls) -> "SerializedDocument":
        """Document published when no agreement could be loaded."""
        return cls(role="", version="")

    @property
    def is_empty(self) -> bool:
        return not self.role and not self.routes

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role, "version": self.version}
        if self.description is not None:
            data["description"] = self.description
        data["routes"] = [route.to_dict() for route in self.routes]
        return data
