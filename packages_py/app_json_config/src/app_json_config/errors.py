from typing import Optional


class ConfigError(Exception):
    """Base exception for configuration loading errors.

    Carries a human readable root cause plus the underlying error, if any.
    """

    def __init__(self, root_cause: str, err: Optional[BaseException] = None):
        msg = f"{root_cause} {err}" if err is not None else root_cause
        super().__init__(msg)
        self.root_cause = root_cause
        self.err = err


class FileOpenError(ConfigError):
    pass


class DecodeError(ConfigError):
    pass


class MergeError(ConfigError):
    pass


class InvalidArgumentError(ConfigError):
    pass


class CertFileUnreadableError(ConfigError):
    pass


class CertParseError(ConfigError):
    pass


class AuthKeyEmptyError(ConfigError):
    pass


class AuthKeyRetrievalError(ConfigError):
    pass


class NotFoundError(ConfigError):
    pass


class ServiceNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__(f"unable to locate service configuration for {name}")
        self.name = name


class DatabaseNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__(f"unable to locate database configuration for {name}")
        self.name = name
