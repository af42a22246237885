"""Cached loader for company tables read from the filesystem."""

import logging
import threading
from pathlib import Path
from typing import Optional

from core import RawCompanyRecord, TableLoadError, load_company_table

logger = logging.getLogger(__name__)


class CompanyTableCache:
    """In-memory cache of loaded company tables.

    Entries are keyed by resolved path and invalidated when the file's
    modification time changes, so an edited table is picked up on the
    next request.
    """

    def __init__(self):
        self._tables: dict[Path, tuple[float, list[RawCompanyRecord]]] = {}
        self._lock = threading.Lock()

    def get(self, table_path: str | Path) -> list[RawCompanyRecord]:
        """Get records for a table, loading it if missing or stale.

        Args:
            table_path: Path to the CSV/TSV table

        Returns:
            List of RawCompanyRecord (never empty)

        Raises:
            TableLoadError: If the table cannot be read or has no rows
        """
        path = Path(table_path).resolve()
        try:
            mtime = path.stat().st_mtime
        except OSError as e:
            raise TableLoadError(f"Cannot read company table {path}: {e}") from e

        with self._lock:
            cached = self._tables.get(path)
            if cached and cached[0] == mtime:
                return cached[1]

        records = load_company_table(path)
        with self._lock:
            self._tables[path] = (mtime, records)
        logger.info("Cached %d companies from %s", len(records), path)
        return records

    def invalidate(self, table_path: Optional[str | Path] = None) -> None:
        """Drop one cached table, or all of them."""
        with self._lock:
            if table_path is None:
                self._tables.clear()
            else:
                self._tables.pop(Path(table_path).resolve(), None)

    @property
    def cached_tables(self) -> int:
        """Number of tables currently cached."""
        return len(self._tables)


# Global singleton for the table cache
_table_cache: Optional[CompanyTableCache] = None


def get_table_cache() -> CompanyTableCache:
    """Get the global table cache, creating it on first use."""
    global _table_cache
    if _table_cache is None:
        _table_cache = CompanyTableCache()
    return _table_cache
