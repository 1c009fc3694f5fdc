"""Tests for the navigation registry and the rendered sidebar."""

import re

import pytest
from httpx import AsyncClient

from roomspa_admin.core.navigation import (
    NAVIGATION,
    NavItem,
    SidebarState,
    get_navigation_item,
    is_active,
    resolve_title,
)


def test_resolve_title_prefers_submenu_entry():
    """Test that a child title wins over its parent."""
    assert resolve_title("/admin/analytics/bookings") == "Booking Analytics"
    assert resolve_title("/admin/reports/export") == "Export Data"


def test_resolve_title_uses_parent_for_own_path():
    """Test that a section path resolves to the section label."""
    assert resolve_title("/admin/analytics") == "Analytics"
    assert resolve_title("/admin/users/42") == "Users"


def test_resolve_title_falls_back_to_dashboard():
    """Test the fallback for unknown paths."""
    assert resolve_title("/somewhere/else") == "Dashboard"
    assert resolve_title("/admin") == "Dashboard"


def test_resolve_title_first_match_wins():
    """Test that registry order decides overlapping prefixes."""
    navigation = (
        NavItem(id="a", label="First", href="/admin/x"),
        NavItem(id="b", label="Second", href="/admin/x/y"),
    )
    assert resolve_title("/admin/x/y", navigation) == "First"


def test_dashboard_only_matches_itself():
    """Test that the dashboard entry does not light up for every admin page."""
    assert is_active("/admin", "/admin")
    assert is_active("/admin", "/admin/")
    assert not is_active("/admin", "/admin/users")
    assert is_active("/admin/users", "/admin/users/1")


def test_registry_ids_are_unique():
    """Test that ids are unique across sections and children."""
    ids = [item.id for item in NAVIGATION]
    ids += [sub.id for item in NAVIGATION for sub in item.submenu]
    assert len(ids) == len(set(ids))
    assert get_navigation_item("coupons").href == "/admin/coupons"
    assert get_navigation_item("missing") is None


class TestSidebarState:
    """Tests for per-request sidebar state."""

    def test_owner_section_expanded(self):
        """Test that the section holding the current page starts expanded."""
        state = SidebarState.for_path("/admin/reports/financial")
        assert state.is_expanded("reports")
        assert not state.is_expanded("analytics")

    def test_section_page_expands_itself(self):
        """Test that a section's own page also starts expanded."""
        assert SidebarState.for_path("/admin/analytics").is_expanded("analytics")
        assert SidebarState.for_path("/admin/users").expanded == frozenset()


@pytest.mark.asyncio
class TestRenderedSidebar:
    """Tests for the sidebar as rendered on admin pages."""

    async def test_section_pages_are_linked(self, admin_client: AsyncClient):
        """Test that sections with children still link to their own page."""
        response = await admin_client.get("/admin/users")

        assert 'href="/admin/analytics"' in response.text
        assert 'href="/admin/reports"' in response.text
        assert 'href="/admin/analytics/bookings"' in response.text

    async def test_current_section_open(self, admin_client: AsyncClient):
        """Test that only the section holding the page is rendered open."""
        response = await admin_client.get("/admin/reports/financial")

        sections = re.findall(r'<details class="nav-section"\s*(open)?>', response.text)
        assert sections == ["", "open"]
