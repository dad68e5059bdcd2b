"""Feature modules with auto-discovery.

Each subpackage may provide ``routes`` (exposing ``router``) and
``models`` (ORM classes registered on the shared metadata).
"""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def _module_names() -> list[str]:
    modules_dir = Path(__file__).parent
    return [
        path.name
        for path in sorted(modules_dir.iterdir())
        if path.is_dir() and not path.name.startswith("_")
    ]


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    A module without a ``routes`` submodule is skipped. Any other import
    failure propagates so a broken module is never silently unmounted.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    routers: list[APIRouter] = []

    for name in _module_names():
        routes_path = f"todolist.modules.{name}.routes"
        try:
            module = import_module(routes_path)
        except ModuleNotFoundError as e:
            if e.name != routes_path:
                raise
            continue
        if hasattr(module, "router"):
            routers.append(module.router)
            logger.debug("module_loaded", module=name)

    return routers


def load_models() -> None:
    """Import every module's ``models`` so its tables join the metadata."""
    for name in _module_names():
        models_path = f"todolist.modules.{name}.models"
        try:
            import_module(models_path)
        except ModuleNotFoundError as e:
            if e.name != models_path:
                raise
