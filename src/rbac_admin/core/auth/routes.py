"""Session API routes.

Token issuance lives in the identity service. These endpoints turn a
valid access token into the dashboard session: profile, effective
permissions and the permission-filtered menu tree.
"""

from fastapi import APIRouter

from rbac_admin.core.auth.dependencies import CurrentSession, CurrentUser
from rbac_admin.core.auth.schemas import ProjectRoleTable, SessionResponse
from rbac_admin.core.permissions.repos import AccessRepo
from rbac_admin.core.permissions.roles import role_table
from rbac_admin.core.permissions.session import SessionState


router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Get current session",
    description="Returns the user, their effective permissions and their menu tree.",
)
async def get_me(session: CurrentSession) -> SessionResponse:
    """Get the current session view."""
    return SessionResponse.from_view(session.current)


@router.post(
    "/me/refresh",
    response_model=SessionResponse,
    summary="Refresh current session",
    description="Re-runs permission resolution after group or permission changes.",
)
async def refresh_me(current_user: CurrentUser, repository: AccessRepo) -> SessionResponse:
    """Recompute the session view from current data."""
    view = await SessionState(current_user.id).refresh(repository)
    return SessionResponse.from_view(view)


@router.get(
    "/project-roles",
    response_model=ProjectRoleTable,
    summary="Project role actions",
    description="The table of actions each collab hub project role may perform.",
)
async def get_project_roles(session: CurrentSession) -> ProjectRoleTable:  # noqa: ARG001
    """Return the project role table."""
    return ProjectRoleTable(roles=role_table())
