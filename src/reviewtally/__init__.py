"""Live response word counts for structured plain-text review forms."""

__version__ = "0.1.0"
