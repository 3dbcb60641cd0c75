"""API layer - routing and dependencies."""


def get_api_router():
    """Import the router lazily; feature modules import ``api.dependencies``."""
    from rbac_admin.api.router import api_router  # noqa: PLC0415

    return api_router


__all__ = ["get_api_router"]
