"""Navigation shell for the authenticated dashboard.

Decides whether the sidebar/header chrome is shown for a route and which
item is highlighted. Pure presentation: nothing here touches storage.
"""

from dataclasses import dataclass, field

from med1.auth.models import UserAccount

# Route prefixes that render the navigation chrome
NAVIGATION_ROUTE_PREFIXES = (
    "/dashboard",
    "/profile",
    "/links",
    "/forms",
)

PROFILE_HREF = "/profile"


@dataclass(frozen=True)
class NavItem:
    """Single navigation entry."""
    href: str
    label: str
    icon: str
    description: str | None = None


@dataclass(frozen=True)
class NavSection:
    """Titled group of navigation entries."""
    title: str
    items: tuple[NavItem, ...]


NAV_SECTIONS: tuple[NavSection, ...] = (
    NavSection(
        title="Dashboard",
        items=(
            NavItem("/dashboard", "Dashboard", "chart-bar", "Overview"),
            NavItem("/dashboard/services", "Services", "shopping-bag", "Manage services"),
            NavItem("/dashboard/indications", "Indications", "link", "Manage referral links"),
            NavItem("/links", "Pages", "link", "Link pages"),
            NavItem("/forms", "Forms", "document-text", "Public forms"),
            NavItem("/dashboard/leads", "Leads", "users", "Contact list"),
            NavItem("/dashboard/pacientes", "Clients", "heart", "Manage patients"),
            NavItem("/dashboard/pipeline", "Pipeline", "funnel", "Status pipeline"),
        ),
    ),
)


@dataclass
class NavigationState:
    """What the shell renders for one request."""
    path: str
    sections: list[dict] = field(default_factory=list)
    profile: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "visible": True,
            "path": self.path,
            "sections": self.sections,
            "profile": self.profile,
        }


def shows_navigation(path: str | None) -> bool:
    """True if the route is one of the dashboard routes that get the chrome."""
    if not path:
        return False
    return any(path.startswith(prefix) for prefix in NAVIGATION_ROUTE_PREFIXES)


def is_active(item: NavItem, path: str) -> bool:
    # Exact match only: /dashboard is not active on /dashboard/leads
    return item.href == path


def build_navigation(path: str | None, user: UserAccount | None = None) -> NavigationState | None:
    """Build the navigation for `path`, or None when no chrome is shown.

    Args:
        path: Current route path
        user: Session user, used for the profile avatar entry

    Returns:
        NavigationState, or None outside the dashboard routes
    """
    if not shows_navigation(path):
        return None

    sections = [
        {
            "title": section.title,
            "items": [
                {
                    "href": item.href,
                    "label": item.label,
                    "icon": item.icon,
                    "description": item.description,
                    "active": is_active(item, path),
                }
                for item in section.items
            ],
        }
        for section in NAV_SECTIONS
    ]

    profile = {
        "href": PROFILE_HREF,
        "label": "Profile",
        "name": user.name if user else None,
        "image": user.image if user else None,
        "fallback_icon": None if user and user.image else "user-circle",
        "active": path == PROFILE_HREF,
    }

    return NavigationState(path=path, sections=sections, profile=profile)
