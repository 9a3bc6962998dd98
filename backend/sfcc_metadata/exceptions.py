"""
Exceptions raised by the explorer services.
"""


class SchemaMismatchError(ValueError):
    """An OCAPI response did not have the expected shape."""


class SerializationError(ValueError):
    """A document cannot be exported as metadata XML."""


class MetadataWriteError(RuntimeError):
    """A requested create, delete or assign call did not succeed."""

    def __init__(self, message: str, fault: dict | None = None):
        super().__init__(message)
        self.fault = fault or {}


class CallSetupError(ValueError):
    """A catalog call could not be resolved into a request."""


class RemoteFaultError(RuntimeError):
    """The instance answered a call with a fault document."""

    def __init__(self, message: str, fault: dict | None = None):
        super().__init__(message)
        self.fault = fault or {}
