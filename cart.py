"""
Cart counter and the local key-value file it is persisted in.
"""

import json
import logging
import os
import re
import tempfile
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CART_KEY = "cartCount"

# leading integer, the part parseInt would read
LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# one read-modify-write at a time across sessions
_write_lock = threading.Lock()


class CartError(RuntimeError):
    pass


class LocalStore:
    """String key/value pairs kept in one JSON file, like browser localStorage."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, str]):
        # readers see the old file or the new one, never a truncated one
        folder = os.path.dirname(os.path.abspath(self.path))
        fd, tmp = tempfile.mkstemp(prefix=".eshop-", suffix=".tmp", dir=folder)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value):
        with _write_lock:
            data = self._read()
            data[key] = str(value)
            self._write(data)

    def remove_item(self, key: str):
        with _write_lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


def parse_count(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    m = LEADING_INT.match(raw)
    if m is None:
        logger.warning("Unparsable cart count %r, using 0", raw)
        return 0
    value = int(m.group(1))
    if value < 0:
        logger.warning("Negative cart count %r, using 0", raw)
        return 0
    return value


class CartCounter:
    """
    Global item counter, not a list of cart contents.

    The stored value is read once by load(). Until then nothing is written,
    otherwise the default 0 would overwrite a saved count.
    """

    def __init__(self, store: LocalStore, key: str = CART_KEY):
        self.store = store
        self.key = key
        self.count = 0
        self.loaded = False

    def load(self) -> int:
        if self.loaded:
            raise CartError("cart count already loaded")
        self.count = parse_count(self.store.get_item(self.key))
        self.loaded = True
        return self.count

    def _persist(self):
        if self.loaded:
            self.store.set_item(self.key, str(self.count))

    def add(self) -> int:
        self.count += 1
        self._persist()
        return self.count

    def clear(self) -> int:
        self.count = 0
        self._persist()
        return self.count
