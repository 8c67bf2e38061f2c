"""Error types raised while loading, analyzing, and rendering diagrams."""

from __future__ import annotations


class ClassDiagramError(Exception):
    """Base class for user-facing ClassDiagram failures."""


class ArtifactAccessError(ClassDiagramError):
    """The source artifact could not be opened or read."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Cannot read artifact '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnresolvableDescriptorError(ClassDiagramError):
    """A single archive entry could not be decoded into a type descriptor."""


class UnknownNotationError(ClassDiagramError, LookupError):
    """No renderer is registered under the requested notation name."""

    def __init__(self, notation: str, known=()) -> None:
        self.notation = notation
        self.known = tuple(known)
        message = f"Unknown format: {notation}"
        if self.known:
            message += f" (expected one of: {', '.join(self.known)})"
        super().__init__(message)


class UnrecognizedRelationshipKind(RuntimeError):
    """A renderer has no arrow for a relationship kind."""
