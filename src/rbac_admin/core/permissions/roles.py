"""Project role to action table.

Collab hub projects give each member one project role. What a role may
do inside a project is decided here and nowhere else; clients fetch the
table instead of keeping their own copy.
"""

from enum import StrEnum
from types import MappingProxyType


class ProjectRole(StrEnum):
    """Role of a member inside a collab hub project."""

    PM = "PM"
    BC = "BC"
    DEV = "DEV"
    QC = "QC"


_DAILY_REPORTER = frozenset({"create_daily", "update_daily", "view_dailies"})

PROJECT_ROLE_ACTIONS = MappingProxyType(
    {
        ProjectRole.PM: frozenset(
            {
                "create_project",
                "update_project",
                "delete_project",
                "manage_members",
                "create_task",
                "update_task",
                "delete_task",
                "assign_task",
                "view_all_dailies",
                "view_summary",
            }
        ),
        ProjectRole.BC: frozenset({"create_task", "update_task"}) | _DAILY_REPORTER,
        ProjectRole.DEV: frozenset({"update_assigned_task"}) | _DAILY_REPORTER,
        ProjectRole.QC: frozenset({"update_qc_task"}) | _DAILY_REPORTER,
    }
)


def allowed_actions(role: str | None) -> frozenset[str]:
    """Actions granted to ``role``; unknown roles get none."""
    if role is None:
        return frozenset()
    try:
        return PROJECT_ROLE_ACTIONS[ProjectRole(role)]
    except ValueError:
        return frozenset()


def can_perform(role: str | None, action: str) -> bool:
    """Check whether a project role may perform ``action``."""
    return action in allowed_actions(role)


def role_table() -> dict[str, list[str]]:
    """Serializable copy of the table with sorted action lists."""
    return {role.value: sorted(actions) for role, actions in PROJECT_ROLE_ACTIONS.items()}
