"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation and shared
by every codec built from it.
"""

from dataclasses import dataclass

# Accepted values for ``RouterConfig.case_prefix``
CASE_PREFIX_MODES = ("name", "lower", "kebab")


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(case_prefix="lower", strip_slashes=True)
    """

    # Segment delimiter used to split incoming paths and join rendered ones
    separator: str = "/"

    # Literal prefix for sum cases that do not declare one:
    # "name" (case name as-is), "lower" (lower-cased), "kebab" (CamelCase -> camel-case)
    case_prefix: str = "name"

    # Trim leading/trailing separators before splitting ("/user/42" -> "user/42")
    strip_slashes: bool = False
