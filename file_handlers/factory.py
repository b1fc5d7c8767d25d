from file_handlers.xlink.xlink_handler import XLinkHandler
from file_handlers.base_handler import BaseFileHandler


def get_handler_for_data(data: bytes) -> BaseFileHandler:
    for handler_class in [
        XLinkHandler,
    ]:
        if handler_class.can_handle(data):
            return handler_class()
    raise ValueError("Unsupported file type")
