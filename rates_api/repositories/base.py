"""Store contract shared by the file-backed store and the SQL adapter."""
from __future__ import annotations

from typing import Optional, Protocol

from rates_api.core.config import Settings
from rates_api.domain.rates import Rate


class RateStore(Protocol):
    def list(
        self,
        query_type: Optional[str] = None,
        query: Optional[str] = None,
        position: int = 0,
        size: Optional[int] = None,
    ) -> list[Rate]: ...

    def create(self, rate: Rate, actor: Optional[str] = None) -> Rate: ...

    def read(self, id: str) -> Rate: ...

    def update(self, id: str, rate: Rate, actor: Optional[str] = None) -> Rate: ...

    def delete(self, id: str, actor: Optional[str] = None) -> None: ...

    def count(self) -> int: ...


def build_store(settings: Settings) -> RateStore:
    """Instantiate the backend named by settings.storage_backend."""
    backend = settings.storage_backend
    if backend == "file":
        from .file_store import FileRateStore

        return FileRateStore(
            settings.seed_file,
            settings.data_file,
            persistent=settings.persistent,
            actor=settings.default_actor,
        )
    if backend == "sql":
        from .sql_repository import SQLRateRepository

        return SQLRateRepository(actor=settings.default_actor)
    raise ValueError(f"unknown storage backend {backend!r} (expected 'file' or 'sql')")
