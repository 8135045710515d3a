"""Breadcrumb trail shared by admin pages and the layout that renders it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from flask import Flask, g, has_request_context

ClickAction = Callable[[], str]


@dataclass(frozen=True)
class BreadcrumbItem:
    """One navigation step.

    ``link`` is a ready href; ``on_click`` is resolved to an href at render
    time. Either one makes a non-final item clickable.
    """

    label: str
    link: Optional[str] = None
    on_click: Optional[ClickAction] = None


@dataclass(frozen=True)
class RenderedCrumb:
    label: str
    href: Optional[str]
    clickable: bool
    active: bool


class BreadcrumbContext:
    """Mutable container for the current trail.

    ``update_breadcrumb`` is bound once per context, so views may hold on to it
    without it changing identity between renders.
    """

    def __init__(self) -> None:
        self._items: Tuple[BreadcrumbItem, ...] = ()
        self.version = 0

        def update_breadcrumb(items: Iterable[BreadcrumbItem]) -> None:
            new_items = tuple(items)
            if new_items == self._items:
                return
            self._items = new_items
            self.version += 1

        self.update_breadcrumb = update_breadcrumb

    @property
    def breadcrumb_items(self) -> Tuple[BreadcrumbItem, ...]:
        return self._items

    def render(self) -> List[RenderedCrumb]:
        return render_breadcrumb(self._items)


def render_breadcrumb(items: Sequence[BreadcrumbItem]) -> List[RenderedCrumb]:
    """Build the view model for the breadcrumb bar; empty when there is no trail."""
    if not items:
        return []
    last = len(items) - 1
    rendered = []
    for index, item in enumerate(items):
        active = index == last
        href = None
        if not active:
            if item.link:
                href = item.link
            elif item.on_click is not None:
                href = item.on_click()
        rendered.append(
            RenderedCrumb(label=item.label, href=href, clickable=href is not None, active=active)
        )
    return rendered


_CONTEXT_KEY = "_breadcrumb_context"


def use_breadcrumb() -> BreadcrumbContext:
    """Return the request's breadcrumb context."""
    context = g.get(_CONTEXT_KEY) if has_request_context() else None
    if context is None:
        raise RuntimeError("use_breadcrumb must be called inside a request with a breadcrumb provider")
    return context


def init_breadcrumbs(app: Flask) -> None:
    """Install one breadcrumb context per request and expose it to templates."""

    @app.before_request
    def _provide_breadcrumb() -> None:
        setattr(g, _CONTEXT_KEY, BreadcrumbContext())

    @app.context_processor
    def _inject_breadcrumb():
        context = g.get(_CONTEXT_KEY)
        return {"breadcrumb": context.render() if context is not None else []}


__all__ = [
    "BreadcrumbContext",
    "BreadcrumbItem",
    "RenderedCrumb",
    "init_breadcrumbs",
    "render_breadcrumb",
    "use_breadcrumb",
]
