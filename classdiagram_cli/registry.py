"""Notation name -> renderer lookup."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .errors import UnknownNotationError
from .models import DiagramGraph
from .renderers import PlantUmlRenderer, Renderer, YumlRenderer


class RendererRegistry:
    """Case-insensitive registry of diagram renderers."""

    def __init__(self) -> None:
        self._renderers: Dict[str, Renderer] = {}

    def register(self, renderer: Renderer) -> None:
        if not renderer.name:
            raise ValueError(f"{type(renderer).__name__} has no notation name")
        self._renderers[renderer.name.lower()] = renderer

    def resolve(self, notation: str) -> Optional[Renderer]:
        """Return the renderer for *notation*, or None when it is not registered."""
        return self._renderers.get(notation.strip().lower())

    def names(self) -> List[str]:
        return list(self._renderers)


def default_registry() -> RendererRegistry:
    registry = RendererRegistry()
    registry.register(YumlRenderer())
    registry.register(PlantUmlRenderer())
    return registry


REGISTRY = default_registry()


def render(notation: str, graph: DiagramGraph, registry: Optional[RendererRegistry] = None) -> Tuple[str, str]:
    """Render *graph* with the named notation.

    Returns:
        ``(text, file_suffix)`` for the chosen renderer.

    Raises:
        UnknownNotationError: when no renderer is registered for *notation*.
    """
    registry = registry or REGISTRY
    renderer = registry.resolve(notation)
    if renderer is None:
        raise UnknownNotationError(notation, registry.names())
    return renderer.render(graph), renderer.file_suffix
