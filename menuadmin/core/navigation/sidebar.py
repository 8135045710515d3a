"""Admin sidebar: section tree, feature gating and active highlighting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from flask import url_for

from menuadmin.core.events.event_bus import EventBus
from menuadmin.core.events.event_models import EventRecord
from menuadmin.core.navigation.breadcrumb import BreadcrumbContext, BreadcrumbItem
from menuadmin.core.session.events import ADMIN_FEATURES_UPDATED
from menuadmin.core.session.schemas import FeatureFlagSet

DASHBOARD_ENDPOINT = "admin_pages.dashboard"


@dataclass(frozen=True)
class SidebarSection:
    key: str
    label: str
    endpoint: Optional[str] = None
    feature: Optional[str] = None
    children: Tuple["SidebarSection", ...] = ()


SIDEBAR_SECTIONS: Tuple[SidebarSection, ...] = (
    SidebarSection("admin-controls", "Admin Controls", "admin_pages.admin_controls"),
    SidebarSection("management-controls", "Management Controls", "admin_pages.management_controls"),
    SidebarSection(
        "menu",
        "Menu",
        children=(
            SidebarSection("category", "Category", "admin_pages.category"),
            SidebarSection("daily-offers", "Daily Offers", "admin_pages.daily_offers", feature="dailyOfferToggle"),
            SidebarSection("image-uploads", "Image Uploads", "admin_pages.image_uploads"),
        ),
    ),
    SidebarSection(
        "events",
        "Events",
        feature="eventsToggle",
        children=(
            SidebarSection("create-event", "Create Event", "admin_pages.create_event"),
            SidebarSection("manage-events", "Manage Events", "admin_pages.manage_events"),
        ),
    ),
    SidebarSection("orders", "Orders", "admin_pages.orders", feature="ordersToggle"),
    SidebarSection("review-analytics", "Review Analytics", "admin_pages.review_analytics"),
    SidebarSection("user-info", "User Info", "admin_pages.user_info"),
)


def _index_sections() -> Dict[str, Tuple[SidebarSection, Optional[SidebarSection]]]:
    index: Dict[str, Tuple[SidebarSection, Optional[SidebarSection]]] = {}
    for section in SIDEBAR_SECTIONS:
        index[section.key] = (section, None)
        for child in section.children:
            index[child.key] = (child, section)
    return index


SECTION_INDEX = _index_sections()


@dataclass
class SidebarEntry:
    key: str
    label: str
    href: Optional[str]
    active: bool
    expanded: bool = False
    children: List["SidebarEntry"] = field(default_factory=list)


class AdminSidebar:
    """Sidebar state for one rendered admin page.

    Subscribes to feature updates on ``event_bus`` and applies the flags carried
    by the event, without going back to the cookie store. Call :meth:`close`
    once the page is done so the subscription does not outlive it.
    """

    def __init__(
        self,
        features: FeatureFlagSet,
        *,
        active: Optional[str] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.features = features
        self.active = active
        self._event_bus = event_bus
        if event_bus is not None:
            event_bus.subscribe(ADMIN_FEATURES_UPDATED, self._on_features_updated)

    def _on_features_updated(self, event: EventRecord) -> None:
        self.features = FeatureFlagSet.model_validate(event.payload.get("features") or {})

    def close(self) -> None:
        if self._event_bus is not None:
            self._event_bus.unsubscribe(ADMIN_FEATURES_UPDATED, self._on_features_updated)
            self._event_bus = None

    def publish_trail(self, breadcrumb: BreadcrumbContext) -> None:
        """Set the trail for the active section on the given breadcrumb container."""
        breadcrumb.update_breadcrumb(trail_for(self.active) if self.active else [BreadcrumbItem("Dashboard")])

    def is_visible(self, section: SidebarSection) -> bool:
        return section.feature is None or self.features.is_enabled(section.feature)

    def is_active(self, key: str) -> bool:
        if self.active is None:
            return False
        if self.active == key:
            return True
        _, parent = SECTION_INDEX.get(self.active, (None, None))
        return parent is not None and parent.key == key

    def visible_sections(self) -> List[SidebarSection]:
        return [section for section in SIDEBAR_SECTIONS if self.is_visible(section)]

    def entries(self) -> List[SidebarEntry]:
        """Build the visible tree; needs an app context to resolve URLs."""
        result = []
        for section in self.visible_sections():
            children = [
                SidebarEntry(
                    key=child.key,
                    label=child.label,
                    href=url_for(child.endpoint) if child.endpoint else None,
                    active=self.active == child.key,
                )
                for child in section.children
                if self.is_visible(child)
            ]
            active = self.is_active(section.key)
            result.append(
                SidebarEntry(
                    key=section.key,
                    label=section.label,
                    href=url_for(section.endpoint) if section.endpoint else None,
                    active=active,
                    expanded=active and bool(children),
                    children=children,
                )
            )
        return result


def trail_for(section_key: str) -> List[BreadcrumbItem]:
    """Breadcrumb trail for a sidebar section: Dashboard, group, section."""
    dashboard = BreadcrumbItem("Dashboard", on_click=lambda: url_for(DASHBOARD_ENDPOINT))
    entry = SECTION_INDEX.get(section_key)
    if entry is None:
        return [BreadcrumbItem("Dashboard")]
    section, parent = entry
    trail = [dashboard]
    if parent is not None:
        trail.append(BreadcrumbItem(parent.label))
    trail.append(BreadcrumbItem(section.label))
    return trail


__all__ = [
    "AdminSidebar",
    "SECTION_INDEX",
    "SIDEBAR_SECTIONS",
    "SidebarEntry",
    "SidebarSection",
    "trail_for",
]
