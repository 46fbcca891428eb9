"""Base error type shared by every rendish package."""

from __future__ import annotations


class RendishError(Exception):
    """An expected failure, identified by a ``code`` string.

    Formats as ``CODE: message``; the command line prints it as is.
    """

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"
