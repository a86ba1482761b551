"""Constants for diagram parsing, synthesis and validation."""

# Notation
ER_ROOT_KEYWORD = "erDiagram"
ER_FORMAT = "mermaid"
SUPPORTED_FORMATS = ("mermaid", "tikz", "pgf", "plantuml")

# Cardinality tokens (Mermaid erDiagram)
ONE_TO_MANY = "||--o{"
DEFAULT_RELATIONSHIP_LABEL = "has"

# Lines that open a diagram, per notation (lower-cased for matching)
DIAGRAM_START_MARKERS = ("erdiagram", "digraph", "@startuml", "\\begin{tikzpicture}")
CODE_FENCE_LANGUAGES = ("mermaid", "tikz", "pgf", "latex", "plantuml")

# Content-quality thresholds
MIN_RESPONSE_LENGTH = 10
MIN_DIAGRAM_LINES = 3
EXTRACT_MIN_LINES_BEFORE_BLANK_STOP = 5
EXTRACT_BLANK_LINE_RUN = 3

# Logging truncation
LOG_TRUNCATE_LENGTH = 200
