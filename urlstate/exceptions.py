from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "MissingDependencyError",
    "SerializationError",
    "UrlStateError",
)


class UrlStateError(Exception):
    """Base exception class from which all urlstate exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``UrlStateError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(UrlStateError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install urlstate[{install_package or package}]' to install urlstate with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(UrlStateError):
    """A builder or cache was configured with invalid settings."""


class SerializationError(UrlStateError):
    """Encoding or decoding of a structured value failed."""

    value: Optional[str]

    def __init__(self, message: Optional[str] = None, value: Optional[str] = None) -> None:
        if message is None:
            message = "Issues serializing URL state value."
        detail_message = message
        if value:
            detail_message = f"{message}\nValue: {value}"
        super().__init__(detail=detail_message)
        self.value = value
