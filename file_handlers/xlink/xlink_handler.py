import logging
import os
from typing import List, Optional

from file_handlers.base_handler import BaseFileHandler
from utils.hash_name_manager import HashNameManager
from .xlink_file import XLinkFile, decode_xlink
from .xlink_types import XLinkError, XLinkHeaderVariant

logger = logging.getLogger(__name__)


class XLinkHandler(BaseFileHandler):
    def __init__(self):
        super().__init__()
        self.raw_data: bytes = b""
        self.xlink: Optional[XLinkFile] = None
        self.header_variant: Optional[XLinkHeaderVariant] = None
        self.big_endian: Optional[bool] = None

    @classmethod
    def can_handle(cls, data: bytes) -> bool:
        return XLinkFile.can_handle(data)

    def supports_editing(self) -> bool:
        return False

    def read(self, data: bytes):
        settings = self.settings
        variant = self.header_variant
        if variant is None:
            variant = XLinkHeaderVariant.parse(settings.get("xlink_header_variant", "ELinkBOTW"))
        big_endian = self.big_endian
        if big_endian is None:
            big_endian = bool(settings.get("xlink_big_endian", False))
        HashNameManager.instance().hash_list_path = settings.get("xlink_hash_list_path", "")

        try:
            self.xlink = decode_xlink(data, variant, big_endian)
        except XLinkError as e:
            logger.error(f"Failed to decode XLink {self.filepath or '<memory>'}: {e}")
            raise
        self.raw_data = bytes(data)
        self.header_variant = variant
        self.big_endian = big_endian
        self.modified = False
        logger.info(f"Decoded {len(self.xlink.entries)} XLink user entries ({variant.name})")

    def rebuild(self) -> bytes:
        # Writing XLink binaries is not supported, saving keeps the original bytes
        return self.raw_data

    def export_entries(self, folder: str, indent: Optional[int] = None) -> List[str]:
        """Write one JSON file per user entry and return the written paths."""
        if not self.xlink:
            return []
        if indent is None:
            indent = int(self.settings.get("export_indent", 2))
        os.makedirs(folder, exist_ok=True)
        written = []
        for entry in self.xlink.entries:
            path = os.path.join(folder, f"{entry.name}.json")
            entry.export_json(path, indent)
            written.append(path)
        logger.info(f"Exported {len(written)} entries to {folder}")
        return written

    def create_viewer(self):
        try:
            from .xlink_viewer import XLinkViewer
        except ImportError:
            logger.exception("XLink viewer unavailable")
            return None
        viewer = XLinkViewer(self)
        viewer.modified_changed.connect(self.modified_changed.emit)
        return viewer
