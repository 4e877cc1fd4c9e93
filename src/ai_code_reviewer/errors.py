"""Exception hierarchy for the reviewer.

The diff-processing core never raises on malformed input; these errors come
from the I/O edges (configuration, git, provider calls).
"""


class ReviewerError(Exception):
    """Base class for all reviewer errors."""


class ConfigError(ReviewerError, ValueError):
    """Invalid or incomplete configuration (e.g. missing provider key)."""


class ProviderError(ReviewerError, RuntimeError):
    """A language-model provider call failed or returned nothing usable."""


class GitError(ReviewerError, RuntimeError):
    """A git command failed fatally."""
