"""Custom exceptions for deepcheck."""


class DeepCheckError(Exception):
    """Base exception for deepcheck errors."""
    pass


class NoticeError(DeepCheckError):
    """Error wrapped by every notice unless replaced with Notice.wrap."""
    pass


class RegistrationError(DeepCheckError):
    """Raised when a type checker or type dumper cannot be registered."""
    def __init__(self, type_name: str, reason: str):
        super().__init__(f"Cannot register '{type_name}': {reason}")
        self.type_name = type_name
        self.reason = reason


class ConfigError(DeepCheckError):
    """Raised when configuration values are invalid."""
    def __init__(self, key: str, reason: str):
        super().__init__(f"Invalid configuration key '{key}': {reason}")
        self.key = key
        self.reason = reason


# Sentinel wrapped by notices created with Notice(...).
ERR_NOTICE = NoticeError("notice error")
