"""Turn type descriptors into an ordered sequence of entities and relationships.

Each analyzed type contributes its :class:`DiagramEntity` followed directly by
the relationships discovered while scanning it, in scan order:
fields, methods, supertype, interfaces.  Repeated references produce repeated
edges; nothing is deduplicated or reordered.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from . import config
from .ignore_filter import IgnoreFilter
from .models import (
    DiagramEntity,
    DiagramGraph,
    Relationship,
    RelationshipKind,
    TypeDescriptor,
    TypeRef,
)

logger = logging.getLogger(__name__)


class ClassAnalyzer:
    """Build a :data:`DiagramGraph` from a batch of type descriptors."""

    def __init__(
        self,
        descriptors: Sequence[TypeDescriptor],
        ignore_prefixes: Iterable[str] = (),
        show_fields: bool = False,
        show_methods: bool = False,
        fully_qualified_names: bool = False,
    ) -> None:
        self.descriptors = list(descriptors)
        self.ignore_filter = IgnoreFilter(ignore_prefixes)
        self.show_fields = show_fields
        self.show_methods = show_methods
        self.fully_qualified_names = fully_qualified_names

    def analyze(self) -> DiagramGraph:
        graph: DiagramGraph = []
        entity_count = 0
        skipped = 0

        for descriptor in self.descriptors:
            if self.ignore_filter.should_ignore(descriptor.qualified_name):
                skipped += 1
                continue

            entity, relationships = self._analyze_type(descriptor)
            graph.append(entity)
            graph.extend(relationships)
            entity_count += 1

        logger.debug(
            "Analyzed %d types (%d ignored): %d relationships",
            entity_count, skipped, len(graph) - entity_count,
        )
        return graph

    # ------------------------------------------------------------------
    # Per-type scan
    # ------------------------------------------------------------------

    def _analyze_type(self, descriptor: TypeDescriptor):
        name = self._display_name(descriptor.qualified_name, descriptor.simple_name)
        entity = DiagramEntity(name, descriptor.is_interface)
        relationships: List[Relationship] = []

        def associate(ref: TypeRef) -> None:
            target = ref.component()
            if not self.ignore_filter.should_ignore(target.qualified_name):
                relationships.append(
                    Relationship(name, self._ref_name(target), RelationshipKind.ASSOCIATION)
                )

        if self.show_fields:
            for fld in descriptor.fields:
                entity.add_field(f"+{fld.name}:{fld.type.display_simple_name}")
                associate(fld.type)
                # One level only: arguments of the field's own type.
                for arg in fld.type.type_args:
                    associate(arg)

        if self.show_methods:
            for method in descriptor.methods:
                params = ", ".join(p.display_simple_name for p in method.parameter_types)
                entity.add_member(
                    f"+{method.name}({params}):{method.return_type.display_simple_name}"
                )
                for param in method.parameter_types:
                    associate(param)

            for ctor in descriptor.constructors:
                params = ", ".join(p.display_simple_name for p in ctor.parameter_types)
                entity.add_member(f"+{descriptor.simple_name}({params})")

        superclass = descriptor.superclass
        if (
            superclass is not None
            and superclass.qualified_name != config.ROOT_TYPE
            and not self.ignore_filter.should_ignore(superclass.qualified_name)
        ):
            relationships.append(
                Relationship(name, self._ref_name(superclass), RelationshipKind.EXTENDS)
            )

        for interface in descriptor.interfaces:
            if not self.ignore_filter.should_ignore(interface.qualified_name):
                relationships.append(
                    Relationship(name, self._ref_name(interface), RelationshipKind.IMPLEMENTS)
                )

        return entity, relationships

    def _ref_name(self, ref: TypeRef) -> str:
        return self._display_name(ref.qualified_name, ref.simple_name)

    def _display_name(self, qualified_name: str, simple_name: str) -> str:
        return qualified_name if self.fully_qualified_names else simple_name


def analyze(
    descriptors: Sequence[TypeDescriptor],
    ignore_prefixes: Iterable[str] = (),
    show_fields: bool = False,
    show_methods: bool = False,
    fully_qualified_names: bool = False,
) -> DiagramGraph:
    """Convenience wrapper around :class:`ClassAnalyzer`."""
    return ClassAnalyzer(
        descriptors,
        ignore_prefixes=ignore_prefixes,
        show_fields=show_fields,
        show_methods=show_methods,
        fully_qualified_names=fully_qualified_names,
    ).analyze()
