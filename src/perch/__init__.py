"""Perch — type-directed routing between endpoint values and URL paths.

Declare the places an app can navigate to as a union of dataclasses,
and perch derives both directions of the mapping::

    from dataclasses import dataclass
    from perch import endpoint, infer

    @endpoint("")
    @dataclass(frozen=True)
    class Home: ...

    @endpoint("user")
    @dataclass(frozen=True)
    class User:
        id: int

    router = infer(Home | User)
    router.link(User(42))        # "user/42"
    router.set_route("user/42")  # User(id=42)
    router.set_route("user/abc") # None

Template links (kida)::

    from perch.templating import register_router
    register_router(env, router)   # {{ link(page) }}, <a{{ page | href }}>
"""

__version__ = "0.1.0-dev"
__all__ = [
    "Case",
    "ConfigurationError",
    "EndpointRouter",
    "Field",
    "PathCodec",
    "PerchError",
    "Primitive",
    "Record",
    "Ref",
    "RenderError",
    "Resolver",
    "Router",
    "RouterConfig",
    "Routing",
    "Sequence",
    "Sum",
    "Tuple",
    "Variant",
    "compile_codec",
    "describe",
    "endpoint",
    "infer",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name in ("EndpointRouter", "PathCodec", "Router", "Routing", "compile_codec", "infer"):
        from perch import router as _router

        return getattr(_router, name)

    if name in ("describe", "endpoint"):
        from perch import inference as _inference

        return getattr(_inference, name)

    if name == "Resolver":
        from perch.resolver import Resolver

        return Resolver

    if name == "RouterConfig":
        from perch.config import RouterConfig

        return RouterConfig

    if name in ("Case", "Field", "Primitive", "Record", "Ref", "Sequence", "Sum", "Tuple", "Variant"):
        from perch import types as _types

        return getattr(_types, name)

    if name in ("ConfigurationError", "PerchError", "RenderError"):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
