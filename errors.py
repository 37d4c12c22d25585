class BankReaderError(Exception):
    pass


class MalformedContainer(BankReaderError):
    """
    A chunk or an object record claims more bytes than the buffer holds.
    Fatal for the whole file.
    """

    def __init__(self, offset: int, message: str):
        super().__init__(f"{message} (offset {offset})")
        self.offset = offset


class UnknownObjectKind(BankReaderError):

    def __init__(self, kind: int):
        super().__init__(f"Unknown hierarchy object kind {kind:#04x}")
        self.kind = kind


class LengthMismatch(BankReaderError):
    """
    A decoder consumed a different number of bytes than the record declared.
    """

    def __init__(self, what: str, expected: int, received: int):
        super().__init__(
            f"{what}: expecting {expected} bytes, consumed {received} bytes"
        )
        self.what = what
        self.expected = expected
        self.received = received


class InvalidPathSection(BankReaderError):

    def __init__(self, length: int):
        super().__init__(
            f"Association path section of {length} bytes is not a multiple of 12"
        )
        self.length = length


class UnsupportedRevision(BankReaderError):

    def __init__(self, kind: int, revision: str):
        super().__init__(
            f"No decoder registered for object kind {kind:#04x} in revision {revision}"
        )
        self.kind = kind
        self.revision = revision
