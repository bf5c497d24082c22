# maisha_console/core/permissions.py
from dataclasses import dataclass

from maisha_console.schemas.auth import AuthUser

ALL_ROLES = frozenset({"super_admin", "group_admin", "group_user", "member"})
ADMINS = frozenset({"super_admin", "group_admin"})
STAFF = frozenset({"super_admin", "group_admin", "group_user"})


@dataclass(frozen=True)
class Feature:
    """One navigable screen and the roles allowed to see it."""

    key: str
    title: str
    url: str
    roles: frozenset[str]
    icon: str = ""


# Single source of truth for role gating. Navigation, the command palette and
# every page dependency read this table; order is sidebar order.
FEATURES: dict[str, Feature] = {
    f.key: f
    for f in (
        Feature("dashboard", "Dashboard", "/dashboard", ALL_ROLES, "dashboard"),
        Feature("groups", "Groups", "/groups", ADMINS, "groups"),
        Feature("members", "Members", "/members", STAFF, "members"),
        Feature("member_portal", "My Wallet", "/member-portal", frozenset({"member"}), "wallet"),
        Feature("wallets", "Wallets", "/wallets", STAFF, "wallet"),
        Feature("deductions", "Monthly Deductions", "/deductions", ADMINS, "calendar"),
        Feature("withdrawals", "Withdrawals", "/withdrawals", ADMINS, "dollar"),
        Feature("group_policy", "Group Policy", "/group-policy", ADMINS, "shield"),
        Feature("upload", "Excel Upload", "/upload", ADMINS, "upload"),
        Feature("reports", "Reports", "/reports", STAFF, "chart"),
        Feature("payments", "Payments", "/payments", ADMINS, "card"),
    )
}


def is_permitted(user: AuthUser | None, feature: str) -> bool:
    """
    True iff a user with a role is present and the role may use `feature`.

    Unknown features and role-less users are denied.
    """
    if user is None or not user.role:
        return False
    entry = FEATURES.get(feature)
    if entry is None:
        return False
    return user.role in entry.roles


def navigation_for(user: AuthUser | None) -> list[Feature]:
    """Sidebar entries visible to `user`, in table order."""
    return [f for f in FEATURES.values() if is_permitted(user, f.key)]
