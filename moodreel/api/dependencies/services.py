"""Service dependencies for route handlers.

Overridable through ``app.dependency_overrides`` in tests.
"""

from typing import Annotated

from fastapi import Depends

from moodreel.services.discovery import DiscoveryService, get_discovery_service
from moodreel.services.mood import MoodInterpreter, get_mood_interpreter
from moodreel.services.storage import MemoryStorage, get_storage

DiscoveryDep = Annotated[DiscoveryService, Depends(get_discovery_service)]
InterpreterDep = Annotated[MoodInterpreter, Depends(get_mood_interpreter)]
StorageDep = Annotated[MemoryStorage, Depends(get_storage)]
