class Error(Exception):
    pass


class InvalidHeaderError(Error):
    pass


class InvalidSignature(InvalidHeaderError):
    pass


class UnsupportedVersion(InvalidHeaderError):
    pass


class TruncatedError(Error, EOFError):
    pass


class ReadError(Error, OSError):
    pass


class EncodingError(Error, ValueError):
    pass


class RangeOverflowError(Error, OverflowError):
    pass


class DescriptorError(Error):
    pass


class UnknownSectionError(DescriptorError):
    def __init__(self, label: str):
        super().__init__(f"Unknown section in descriptor: {label!r}")
        self.label = label


class FieldParseError(DescriptorError, ValueError):
    pass


class InvalidEnumValue(DescriptorError, ValueError):
    def __init__(self, value: str, enum: str):
        super().__init__(f"Invalid {enum} value: {value!r}")
        self.value = value
        self.enum = enum
