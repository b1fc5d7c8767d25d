#python xlink_export.py <file.belnk> --variant ELinkBOTW --out exported/

#!/usr/bin/env python3
import os
import sys
import argparse
import logging
from typing import List, Optional

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from settings import load_settings
from file_handlers.xlink.xlink_handler import XLinkHandler
from file_handlers.xlink.xlink_types import XLinkError, XLinkHeaderVariant

logger = logging.getLogger("xlink_export")


class _SettingsApp:
    def __init__(self, settings: dict):
        self.settings = settings


def build_parser(settings: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode an XLink binary and export its user entries as JSON")
    parser.add_argument("file_path", help="Path to the XLink file")
    parser.add_argument(
        "--variant", choices=[v.name for v in XLinkHeaderVariant],
        default=settings.get("xlink_header_variant", "ELinkBOTW"),
        help="User header layout of the file",
    )
    parser.add_argument("--big-endian", action="store_true", default=settings.get("xlink_big_endian", False),
                        help="Read the file as big endian")
    parser.add_argument("--out", default=settings.get("export_folder", ""),
                        help="Output folder (defaults to the input file name)")
    parser.add_argument("--hashes", default=settings.get("xlink_hash_list_path", ""),
                        help="Newline separated list of known user names")
    parser.add_argument("--view", action="store_true", help="Open the decoded file in the viewer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    settings = dict(settings)
    settings["xlink_header_variant"] = args.variant
    settings["xlink_big_endian"] = args.big_endian
    settings["xlink_hash_list_path"] = args.hashes

    handler = XLinkHandler()
    handler.app = _SettingsApp(settings)
    handler.filepath = args.file_path

    try:
        with open(args.file_path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.error(f"Failed to read {args.file_path}: {e}")
        return 1

    if not handler.can_handle(data):
        logger.error(f"{args.file_path} is not an XLink file")
        return 1

    try:
        handler.read(data)
    except XLinkError:
        return 1

    folder = args.out or os.path.splitext(os.path.basename(args.file_path))[0]
    handler.export_entries(folder)

    if args.view:
        from PySide6.QtWidgets import QApplication
        app = QApplication.instance() or QApplication(sys.argv[:1])
        viewer = handler.create_viewer()
        if viewer is None:
            return 1
        viewer.setWindowTitle(os.path.basename(args.file_path))
        viewer.resize(900, 700)
        viewer.show()
        return app.exec()
    return 0


if __name__ == "__main__":
    sys.exit(main())
