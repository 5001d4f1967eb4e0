"""Project and file persistence.

The routers depend on the :class:`ProjectStore` protocol only; the in-memory
implementation below backs the default application and the test-suite.
"""

import threading
from typing import Dict, List, Optional, Protocol

from app.models.project import ProjectRecord
from app.models.project_file import ProjectFile


class ProjectStore(Protocol):
    def get_project(self, name: str) -> Optional[ProjectRecord]: ...

    def save_project(self, record: ProjectRecord) -> None: ...

    def get_files(self, name: str) -> List[ProjectFile]: ...

    def get_file(self, name: str, path: str) -> Optional[ProjectFile]: ...

    def save_files(self, name: str, files: List[ProjectFile]) -> List[str]: ...


class InMemoryProjectStore:
    """Thread-safe dictionary-backed store keyed by project name and file path."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._projects: Dict[str, ProjectRecord] = {}
        self._files: Dict[str, Dict[str, ProjectFile]] = {}

    def get_project(self, name: str) -> Optional[ProjectRecord]:
        with self._lock:
            return self._projects.get(name)

    def save_project(self, record: ProjectRecord) -> None:
        with self._lock:
            self._projects[record.name] = record

    def get_files(self, name: str) -> List[ProjectFile]:
        with self._lock:
            return list(self._files.get(name, {}).values())

    def get_file(self, name: str, path: str) -> Optional[ProjectFile]:
        with self._lock:
            return self._files.get(name, {}).get(path)

    def save_files(self, name: str, files: List[ProjectFile]) -> List[str]:
        """Upsert *files* by path and return the saved paths in order."""
        with self._lock:
            bucket = self._files.setdefault(name, {})
            for project_file in files:
                bucket[project_file.path] = project_file
        return [f.path for f in files]

    def reset(self) -> None:
        with self._lock:
            self._projects.clear()
            self._files.clear()


_store = InMemoryProjectStore()


def get_store() -> ProjectStore:
    """FastAPI dependency returning the process-wide store."""
    return _store
