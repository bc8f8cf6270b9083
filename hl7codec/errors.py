"""Exceptions raised by the HL7 codec."""


class HL7Error(Exception):
    """Base class for codec errors."""


class HL7ParseError(HL7Error, ValueError):
    """Fatal parse failure; no document is produced."""


class EmptyInputError(HL7ParseError):
    def __init__(self, message: str = "Message is empty"):
        super().__init__(message)


class MissingHeaderError(HL7ParseError):
    def __init__(self, message: str = "Message must start with MSH segment"):
        super().__init__(message)


class EmptyDocumentError(HL7Error, ValueError):
    def __init__(self, message: str = "Document has no segments to generate"):
        super().__init__(message)
