"""Perch exception hierarchy.

Shared across the resolver, codec builders, and router so every module
raises and catches the same types. A path that does not match is never
an error: parsers yield nothing and the router returns ``None``.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when an endpoint type cannot be compiled into a codec.

    Always raised while the router is being built (unsupported shape,
    unknown primitive kind, conflicting unlabeled cases), never while
    a path is being matched.
    """


class RenderError(PerchError):
    """Raised when a value handed to ``render`` is not of the described type."""
