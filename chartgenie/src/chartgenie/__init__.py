"""ChartGenie: conversational entity-relationship diagrams from natural language."""

__version__ = "0.3.0"
