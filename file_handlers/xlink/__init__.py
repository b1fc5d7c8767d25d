from .xlink_document import (
    ParamValue, XLinkAction, XLinkActionSlot, XLinkAssetEntry, XLinkConditionEntry,
    XLinkProperty, XLinkTriggerActionEntry, XLinkTriggerEntry, XLinkUserEntry,
)
from .xlink_file import XLinkFile, XLinkHeader, decode_xlink
from .xlink_types import (
    XLINK_MAGIC, NO_OFFSET, ParamType, ValueKind, XLinkHeaderVariant,
    XLinkError, SignatureMismatch, MalformedOffset, UnknownParamType, UnknownContainerKind,
    UnsupportedHeaderVariant, MalformedIndexRange, DuplicateEntryName,
)

__all__ = [
    "ParamValue", "XLinkAction", "XLinkActionSlot", "XLinkAssetEntry", "XLinkConditionEntry",
    "XLinkProperty", "XLinkTriggerActionEntry", "XLinkTriggerEntry", "XLinkUserEntry",
    "XLinkFile", "XLinkHeader", "decode_xlink",
    "XLINK_MAGIC", "NO_OFFSET", "ParamType", "ValueKind", "XLinkHeaderVariant",
    "XLinkError", "SignatureMismatch", "MalformedOffset", "UnknownParamType", "UnknownContainerKind",
    "UnsupportedHeaderVariant", "MalformedIndexRange", "DuplicateEntryName",
    "XLinkHandler",
]

def __getattr__(name: str):
    if name == "XLinkHandler":
        from .xlink_handler import XLinkHandler
        globals().update(XLinkHandler=XLinkHandler)
        return XLinkHandler
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
