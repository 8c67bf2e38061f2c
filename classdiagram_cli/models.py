"""Core data models shared by the provider, analyzer, and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


@dataclass
class TypeRef:
    """A type as referenced from a field, parameter, return, or type argument."""
    qualified_name: str
    simple_name: str
    array_dims: int = 0
    type_args: List["TypeRef"] = field(default_factory=list)

    @property
    def is_array(self) -> bool:
        return self.array_dims > 0

    @property
    def display_simple_name(self) -> str:
        return self.simple_name + "[]" * self.array_dims

    def component(self) -> "TypeRef":
        """Return the element type with every array dimension removed.

        ``Cell[][]`` unwraps straight to ``Cell``, not ``Cell[]``: association
        edges point at the class being stored, whatever the nesting depth.
        """
        if not self.is_array:
            return self
        return TypeRef(self.qualified_name, self.simple_name, 0, list(self.type_args))


@dataclass
class FieldInfo:
    name: str
    type: TypeRef


@dataclass
class MethodInfo:
    name: str
    parameter_types: List[TypeRef]
    return_type: TypeRef


@dataclass
class ConstructorInfo:
    parameter_types: List[TypeRef]


@dataclass
class TypeDescriptor:
    """Structural summary of one compiled class or interface."""
    qualified_name: str
    simple_name: str
    is_interface: bool = False
    fields: List[FieldInfo] = field(default_factory=list)
    methods: List[MethodInfo] = field(default_factory=list)
    constructors: List[ConstructorInfo] = field(default_factory=list)
    superclass: Optional[TypeRef] = None
    interfaces: List[TypeRef] = field(default_factory=list)


@dataclass
class DiagramEntity:
    """Rendered node for one analyzed type."""
    name: str
    is_interface: bool = False
    fields: List[str] = field(default_factory=list)
    members: List[str] = field(default_factory=list)

    def add_field(self, summary: str) -> None:
        self.fields.append(summary)

    def add_member(self, summary: str) -> None:
        self.members.append(summary)


class RelationshipKind(Enum):
    ASSOCIATION = "association"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"


@dataclass(frozen=True)
class Relationship:
    source: str
    target: str
    kind: RelationshipKind


DiagramItem = Union[DiagramEntity, Relationship]
DiagramGraph = List[DiagramItem]
