class ConfigError(Exception):
    """Base exception for configuration persistence errors."""


class DocumentTreeError(ConfigError):
    """Raised when a document tree does not have the expected wire shape."""


class CodecError(ConfigError):
    """Raised by codecs when a subtree cannot be turned back into a value."""


class BackendError(ConfigError):
    """Raised when a backend cannot read or write a document."""


class CorruptConfigError(BackendError):
    """Raised when a config file exists but cannot be parsed into a tree."""


class SerializationDepthError(ConfigError):
    """Raised when nesting exceeds the configured depth limit (likely a cycle)."""

    def __init__(self, type_name: str, max_depth: int) -> None:
        super().__init__(f"Nesting deeper than {max_depth} levels while handling '{type_name}'")
        self.type_name = type_name
        self.max_depth = max_depth
