"""Core utilities and shared components for cwtail."""

# Note: Import context lazily to avoid circular imports
# Use: from cwtail.core.context import CwTailContext, pass_context
from cwtail.core.exceptions import BackendError, ConfigurationError, CwTailError
from cwtail.core.output import OutputFormatter

__all__ = [
    "CwTailError",
    "ConfigurationError",
    "BackendError",
    "OutputFormatter",
]
