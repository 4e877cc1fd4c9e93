"""AI-assisted review of unified diffs, chunked for language-model providers."""

__version__ = "0.1.0"
