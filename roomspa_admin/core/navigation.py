"""Admin navigation registry.

The registry is an ordered tuple of sections. Order matters: title resolution
and active-state checks scan it linearly, so for overlapping prefixes the
earlier entry wins.
"""

from dataclasses import dataclass

DASHBOARD_HREF = "/admin"
DEFAULT_TITLE = "Dashboard"


@dataclass(frozen=True)
class NavItem:
    """One sidebar entry, optionally carrying one level of children."""

    id: str
    label: str
    href: str
    icon: str | None = None
    description: str = ""
    badge: str | None = None
    submenu: tuple["NavItem", ...] = ()

    @property
    def has_submenu(self) -> bool:
        return bool(self.submenu)


NAVIGATION: tuple[NavItem, ...] = (
    NavItem(
        id="dashboard",
        label="Dashboard",
        href="/admin",
        icon="layout-dashboard",
        description="Overview and key metrics",
    ),
    NavItem(
        id="users",
        label="Users",
        href="/admin/users",
        icon="users",
        description="Manage all users",
        badge="new",
    ),
    NavItem(
        id="bookings",
        label="Bookings",
        href="/admin/bookings",
        icon="calendar",
        description="Booking management",
    ),
    NavItem(
        id="therapists",
        label="Therapists",
        href="/admin/therapists",
        icon="user-cog",
        description="Therapist management",
    ),
    NavItem(
        id="customers",
        label="Customers",
        href="/admin/customers",
        icon="users",
        description="Customer management",
    ),
    NavItem(
        id="pending-requests",
        label="Pending Requests",
        href="/admin/pending-requests",
        icon="clock",
        description="Pending booking requests",
    ),
    NavItem(
        id="conversations",
        label="Conversations",
        href="/admin/conversations",
        icon="message-square",
        description="Chat management",
    ),
    NavItem(
        id="coupons",
        label="Coupons",
        href="/admin/coupons",
        icon="tag",
        description="Discount coupons",
    ),
    NavItem(
        id="analytics",
        label="Analytics",
        href="/admin/analytics",
        icon="bar-chart-3",
        description="Advanced analytics",
        submenu=(
            NavItem(
                id="booking-analytics",
                label="Booking Analytics",
                href="/admin/analytics/bookings",
                description="Booking trends and insights",
            ),
            NavItem(
                id="therapist-analytics",
                label="Therapist Analytics",
                href="/admin/analytics/therapists",
                description="Therapist performance",
            ),
            NavItem(
                id="advanced-analytics",
                label="Advanced Analytics",
                href="/admin/analytics/advanced",
                description="Geographic and service analytics",
            ),
        ),
    ),
    NavItem(
        id="reports",
        label="Reports",
        href="/admin/reports",
        icon="file-text",
        description="Financial and system reports",
        submenu=(
            NavItem(
                id="financial-reports",
                label="Financial Reports",
                href="/admin/reports/financial",
                description="Revenue and financial analytics",
            ),
            NavItem(
                id="export-data",
                label="Export Data",
                href="/admin/reports/export",
                description="Export various data types",
            ),
        ),
    ),
    NavItem(
        id="monitoring",
        label="Live Monitoring",
        href="/admin/monitoring",
        icon="monitor",
        description="Real-time system monitoring",
    ),
    NavItem(
        id="notifications",
        label="Notifications",
        href="/admin/notifications",
        icon="bell",
        description="Manage notifications",
    ),
    NavItem(
        id="system",
        label="System",
        href="/admin/system",
        icon="activity",
        description="System health and settings",
    ),
    NavItem(
        id="settings",
        label="Settings",
        href="/admin/settings",
        icon="settings",
        description="Application settings",
    ),
)


def get_navigation_item(item_id: str) -> NavItem | None:
    """Return the top-level section with the given id."""
    for item in NAVIGATION:
        if item.id == item_id:
            return item
    return None


def is_active(href: str, path: str) -> bool:
    """
    Check whether a section is active for the current path.

    The dashboard root only matches itself; every other section matches
    any path starting with its href.
    """
    if href == DASHBOARD_HREF:
        return path.rstrip("/") == DASHBOARD_HREF
    return path.startswith(href)


def resolve_title(path: str, navigation: tuple[NavItem, ...] = NAVIGATION) -> str:
    """
    Resolve the page title for a path.

    Args:
        path: Current request path
        navigation: Registry to scan

    Returns:
        Label of the first matching entry, preferring a matching child over
        its parent, or ``"Dashboard"`` when nothing matches
    """
    for item in navigation:
        for sub_item in item.submenu:
            if is_active(sub_item.href, path):
                return sub_item.label
        if is_active(item.href, path):
            return item.label
    return DEFAULT_TITLE


@dataclass(frozen=True)
class SidebarState:
    """
    Initial expansion of the sidebar sections for one page.

    Only the first render is decided here. Expanding and collapsing sections
    and opening the mobile drawer happen in the browser and are not kept
    across page loads.
    """

    expanded: frozenset[str] = frozenset()

    @classmethod
    def for_path(cls, path: str, navigation: tuple[NavItem, ...] = NAVIGATION) -> "SidebarState":
        """Start with the section owning the current path expanded."""
        expanded = frozenset(
            item.id for item in navigation if item.has_submenu and is_active(item.href, path)
        )
        return cls(expanded=expanded)

    def is_expanded(self, item_id: str) -> bool:
        return item_id in self.expanded
