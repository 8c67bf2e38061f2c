"""ClassDiagram CLI — class diagrams from compiled Java archives."""

__version__ = "0.1.0"
