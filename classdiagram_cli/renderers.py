"""Diagram renderers: serialize a DiagramGraph into a concrete notation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import List, Mapping

from .errors import UnrecognizedRelationshipKind
from .models import DiagramEntity, DiagramGraph, Relationship, RelationshipKind


# ===================================================================
# Abstract Renderer Interface
# ===================================================================

class Renderer(ABC):
    """Strategy for one textual diagram notation.

    Subclasses own every formatting decision, including the arrow used for
    each :class:`RelationshipKind`, so the data model stays notation-free.
    """

    name: str = ""
    file_suffix: str = ""
    arrows: Mapping[RelationshipKind, str] = MappingProxyType({})

    def render(self, graph: DiagramGraph) -> str:
        parts: List[str] = []
        for item in graph:
            if isinstance(item, DiagramEntity):
                parts.append(self.render_entity(item))
            else:
                parts.append(self.render_relationship(item))
        return self.assemble(parts)

    def arrow(self, kind: RelationshipKind) -> str:
        try:
            return self.arrows[kind]
        except KeyError:
            raise UnrecognizedRelationshipKind(
                f"{type(self).__name__} has no arrow for {kind!r}"
            ) from None

    @abstractmethod
    def render_entity(self, entity: DiagramEntity) -> str:
        ...

    @abstractmethod
    def render_relationship(self, relationship: Relationship) -> str:
        ...

    @abstractmethod
    def assemble(self, parts: List[str]) -> str:
        """Join rendered items into the final document."""
        ...


# ===================================================================
# yUML (compact inline)
# ===================================================================

class YumlRenderer(Renderer):
    name = "yuml"
    file_suffix = "-yuml.txt"
    arrows = {
        RelationshipKind.ASSOCIATION: "->",
        RelationshipKind.EXTENDS: "^-",
        RelationshipKind.IMPLEMENTS: "^-.-",
    }

    def render_entity(self, entity: DiagramEntity) -> str:
        text = "["
        if entity.is_interface:
            text += "<<interface>>;"
        text += entity.name
        if entity.fields:
            text += "|" + ";".join(entity.fields)
        if entity.members:
            text += "|" + ";".join(entity.members)
        return text + "]"

    def render_relationship(self, relationship: Relationship) -> str:
        arrow = self.arrow(relationship.kind)
        return f"[{relationship.source}]{arrow}[{relationship.target}]"

    def assemble(self, parts: List[str]) -> str:
        return ", ".join(parts)


# ===================================================================
# PlantUML (structured blocks)
# ===================================================================

class PlantUmlRenderer(Renderer):
    name = "plantuml"
    file_suffix = "-plantuml.puml"
    arrows = {
        RelationshipKind.ASSOCIATION: " --> ",
        RelationshipKind.EXTENDS: " <|-- ",
        RelationshipKind.IMPLEMENTS: " <|.. ",
    }

    def render_entity(self, entity: DiagramEntity) -> str:
        keyword = "interface" if entity.is_interface else "class"
        lines = [f"{keyword} {entity.name} {{"]
        lines.extend(f"  {field}" for field in entity.fields)
        lines.extend(f"  {member}" for member in entity.members)
        lines.append("}")
        return "\n".join(lines) + "\n"

    def render_relationship(self, relationship: Relationship) -> str:
        arrow = self.arrow(relationship.kind)
        return f"{relationship.source}{arrow}{relationship.target}\n"

    def assemble(self, parts: List[str]) -> str:
        return "@startuml\n" + "".join(parts) + "@enduml\n"
