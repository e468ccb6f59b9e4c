"""Exceptions raised by solulog."""


class ConfigurationError(ValueError):
    """Raised when a logger cannot be built from the given configuration."""


class TraceparentFormatError(ValueError):
    """Raised when a traceparent carrier string is malformed."""


class LoggerPanic(RuntimeError):
    """Raised after a PANIC record has been delivered.

    Attributes:
        record_message: The message of the record that triggered the panic.
    """

    def __init__(self, record_message: str) -> None:
        super().__init__(record_message)
        self.record_message = record_message
