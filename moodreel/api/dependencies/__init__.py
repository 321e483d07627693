"""FastAPI dependencies."""

from moodreel.api.dependencies.rate_limit import check_rate_limit
from moodreel.api.dependencies.services import (
    DiscoveryDep,
    InterpreterDep,
    StorageDep,
)

__all__ = ["DiscoveryDep", "InterpreterDep", "StorageDep", "check_rate_limit"]
