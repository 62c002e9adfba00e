"""Kida integration — endpoint links inside templates.

Registers a router on a kida Environment so templates can link to
endpoint values instead of hand-writing paths::

    register_router(env, router)

    <a{{ page | href }}>Profile</a>      -> <a href="user/42">Profile</a>
    <form action="{{ link(page) }}">      -> <form action="user/42">
"""

import html
from typing import Any

from kida import Environment
from kida.template import Markup

from perch.router import EndpointRouter


def href(router: EndpointRouter, endpoint: Any) -> Markup:
    """Render ``href="<path>"`` (with a leading space) for *endpoint*.

    Output is Markup so autoescape does not double-escape it.
    """
    return Markup(f' href="{html.escape(router.link(endpoint))}"')


def register_router(
    env: Environment,
    router: EndpointRouter,
    *,
    link_name: str = "link",
    filter_name: str = "href",
) -> None:
    """Expose *router* to templates as a ``link()`` global and an ``href`` filter."""

    def href_filter(endpoint: Any) -> Markup:
        return href(router, endpoint)

    env.add_global(link_name, router.link)
    env.update_filters({filter_name: href_filter})
