"""Rule-based name extraction, intent detection and table synthesis."""

from .names import extract_table_name
from .intent import is_modification
from .connections import infer_connections
from .synthesizer import build_table, synthesize_table
from .templates import select_template
from .fallback import generate_fallback

__all__ = [
    "extract_table_name",
    "is_modification",
    "infer_connections",
    "build_table",
    "synthesize_table",
    "select_template",
    "generate_fallback",
]
