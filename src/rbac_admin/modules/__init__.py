"""Admin feature modules with auto-discovery."""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Return the routers of all feature modules.

    Scans this directory for packages with a ``routes`` submodule that
    defines a ``router``. Routes are imported only here, so importing a
    module's models never pulls in the HTTP layer.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if not path.is_dir() or path.name.startswith("_"):
            continue
        if not (path / "routes.py").exists():
            continue
        module = import_module(f"rbac_admin.modules.{path.name}.routes")
        if hasattr(module, "router"):
            routers.append(module.router)
            logger.debug("module_loaded", module=path.name)

    return routers
