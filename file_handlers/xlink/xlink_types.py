from enum import IntEnum
from typing import Optional, Union

XLINK_MAGIC = b"XLNK"
XLINK_EXTENSIONS = (".belnk", ".bslnk", ".elink", ".slink")

# Stored in offset fields that have nothing to point at
NO_OFFSET = 0xFFFFFFFF

HEADER_FIELD_COUNT = 17
PARAM_DEFINE_ENTRY_SIZE = 12


class ParamType(IntEnum):
    UInt32 = 0
    Float32 = 1
    Bool = 2
    Enum = 3
    String = 4
    Unknown = 5


class ValueKind(IntEnum):
    UInt32 = 0
    Float32 = 1
    Bool = 2
    String = 3


class ContainerKind(IntEnum):
    Switch = 0
    Random = 1
    Random2 = 2


class XLinkHeaderVariant(IntEnum):
    ELinkNormal = 0
    SLinkNormal = 1
    SLinkBOTW = 2
    ELinkBOTW = 3

    @classmethod
    def parse(cls, value: Union["XLinkHeaderVariant", str, int]) -> "XLinkHeaderVariant":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.name.lower() == value.strip().lower():
                    return member
            raise UnsupportedHeaderVariant(f"Unknown header variant {value!r}")
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise UnsupportedHeaderVariant(f"Unknown header variant {value!r}") from None
        raise UnsupportedHeaderVariant(f"Unknown header variant {value!r}")


# Bytes between the local property refs and the sorted asset table of a user header
USER_HEADER_SKIP = {
    XLinkHeaderVariant.ELinkNormal: 4,
    XLinkHeaderVariant.ELinkBOTW: 4,
    XLinkHeaderVariant.SLinkBOTW: 32,
    XLinkHeaderVariant.SLinkNormal: 40,
}


class XLinkError(ValueError):
    """Base error for XLink files that cannot be decoded."""

    def __init__(self, message: str, section: Optional[str] = None, offset: Optional[int] = None):
        self.section = section
        self.offset = offset
        details = []
        if section:
            details.append(f"section={section}")
        if offset is not None:
            details.append(f"offset=0x{offset:X}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class SignatureMismatch(XLinkError):
    pass


class MalformedOffset(XLinkError):
    pass


class UnknownParamType(XLinkError):
    pass


class UnknownContainerKind(XLinkError):
    pass


class UnsupportedHeaderVariant(XLinkError):
    pass


class MalformedIndexRange(XLinkError):
    pass


class DuplicateEntryName(XLinkError):
    pass
