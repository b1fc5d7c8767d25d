import logging
import os
import threading
from typing import Dict, Optional

from utils.hash_util import compute_crc32

logger = logging.getLogger(__name__)

DEFAULT_HASH_LIST_PATH = os.path.join("resources", "data", "xlink", "hashes.txt")


class HashNameManager:
    """Maps CRC32 hashes of known names back to the names.

    The word list is read and hashed once, on the first lookup.
    """
    _instance = None
    _instance_lock = threading.Lock()

    @staticmethod
    def instance():
        """Get singleton instance"""
        if HashNameManager._instance is None:
            with HashNameManager._instance_lock:
                if HashNameManager._instance is None:
                    HashNameManager._instance = HashNameManager()
        return HashNameManager._instance

    def __init__(self, hash_list_path: str = ""):
        self._hash_list_path = hash_list_path or DEFAULT_HASH_LIST_PATH
        self._hashes: Dict[int, str] = {}
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def hash_list_path(self) -> str:
        return self._hash_list_path

    @hash_list_path.setter
    def hash_list_path(self, path: str):
        path = path or DEFAULT_HASH_LIST_PATH
        with self._lock:
            if path != self._hash_list_path:
                self._hash_list_path = path
                self._hashes = {}
                self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def _ensure_loaded(self):
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            self._hashes = self._build(self._hash_list_path)
            self._loaded = True

    @staticmethod
    def _build(path: str) -> Dict[int, str]:
        hashes: Dict[int, str] = {}
        if not os.path.exists(path):
            logger.info(f"Hash list not found: {path}, user data names will stay numeric")
            return hashes
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                name = line.rstrip("\r\n")
                if not name:
                    continue
                hashes.setdefault(compute_crc32(name), name)
        logger.info(f"Loaded {len(hashes)} names from {path}")
        return hashes

    def find(self, name_hash: int) -> Optional[str]:
        self._ensure_loaded()
        return self._hashes.get(name_hash)

    def lookup(self, name_hash: int) -> str:
        """Known name for the hash, or the hash as a decimal string."""
        name = self.find(name_hash)
        return name if name is not None else str(name_hash)
