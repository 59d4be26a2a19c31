"""StockLedgerStore — durable, per-godown ledger files.

Every write replaces the whole file. The new content is written to a
temporary sibling first and moved over the ledger, so readers see either the
old or the new file, never a partial one. A monotonic version counter is kept
next to each ledger and bumped on every write.

Writers for the same godown are serialized through ``lock()``. Readers take
it only while reading the text and version together.
"""

import os
import re
import threading
from pathlib import Path

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from godown.ledger.records import LedgerFile, format_ledger_date
from godown.utils import settings

logger = structlog.get_logger(__name__)

_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_FILE_PREFIX = "daily_stock_"
_FILE_SUFFIX = ".csv"
_VERSION_SUFFIX = ".version"


def validate_warehouse_code(warehouse_code) -> str:
    code = str(warehouse_code).strip()
    if not _CODE_PATTERN.match(code):
        raise ValidationError({"warehouse_code": [f"Invalid godown code '{warehouse_code}'"]})
    return code


class StockLedgerStore:
    """File-backed ledgers, one ``daily_stock_<godown>.csv`` per godown."""

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root is not None else settings.ledger_dir()
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, warehouse_code: str) -> Path:
        code = validate_warehouse_code(warehouse_code)
        return self.root / f"{_FILE_PREFIX}{code}{_FILE_SUFFIX}"

    def _version_path(self, warehouse_code: str) -> Path:
        code = validate_warehouse_code(warehouse_code)
        return self.root / f"{_FILE_PREFIX}{code}{_VERSION_SUFFIX}"

    def lock(self, warehouse_code: str) -> threading.RLock:
        """The single-writer lock for a godown. Use as a context manager."""
        code = validate_warehouse_code(warehouse_code)
        with self._locks_guard:
            if code not in self._locks:
                self._locks[code] = threading.RLock()
            return self._locks[code]

    def exists(self, warehouse_code: str) -> bool:
        return self.path_for(warehouse_code).exists()

    def warehouse_codes(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(
            path.name[len(_FILE_PREFIX) : -len(_FILE_SUFFIX)]
            for path in self.root.glob(f"{_FILE_PREFIX}*{_FILE_SUFFIX}")
        )

    def version(self, warehouse_code: str) -> int:
        try:
            text = self._version_path(warehouse_code).read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        return int(text.strip() or 0)

    def read_all(self, warehouse_code: str) -> LedgerFile:
        """Load the whole ledger of a godown.

        Raises ObjectNotFoundError when the godown has no ledger (or an empty
        one). Any other I/O failure propagates unchanged. The read holds the
        godown lock so the version always belongs to the text read.
        """
        code = validate_warehouse_code(warehouse_code)
        with self.lock(code):
            try:
                text = self.path_for(code).read_text(encoding="utf-8")
            except FileNotFoundError:
                raise ObjectNotFoundError(f"Stock ledger for godown {code} not found") from None
            version = self.version(code)

        if not text.strip():
            raise ObjectNotFoundError(f"Stock ledger for godown {code} is empty")

        return LedgerFile.parse(code, text, version=version)

    def append(self, ledger: LedgerFile) -> int:
        """Write ``ledger`` as the full content of its godown's file.

        Records land exactly in the order the caller arranged them. Returns
        the new version.
        """
        duplicates = ledger.duplicates()
        if duplicates:
            raise ValidationError(
                {
                    "records": [
                        f"Duplicate '{kind.value}' row for {format_ledger_date(on)}" for on, kind in duplicates
                    ]
                }
            )

        code = validate_warehouse_code(ledger.warehouse_code)
        with self.lock(code):
            self.root.mkdir(parents=True, exist_ok=True)
            version = self.version(code) + 1
            self._replace(self.path_for(code), ledger.render())
            self._replace(self._version_path(code), f"{version}\n")

        ledger.version = version
        logger.info(
            "Stock ledger written",
            warehouse_code=code,
            records=len(ledger.records),
            items=ledger.width,
            version=version,
        )
        return version

    def create(self, ledger: LedgerFile) -> int:
        """Write a brand new ledger; an existing one is never overwritten."""
        code = validate_warehouse_code(ledger.warehouse_code)
        with self.lock(code):
            if self.exists(code):
                raise ValidationError({"warehouse_code": [f"Stock ledger for godown {code} already exists"]})
            return self.append(ledger)

    @staticmethod
    def _replace(path: Path, content: str) -> None:
        tmp = path.with_name(f"{path.name}.tmp")
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
