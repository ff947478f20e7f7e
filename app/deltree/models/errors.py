"""Error types raised by the deletion engine."""

from collections.abc import Iterator, Sequence


class CompositeDeletionError(OSError):
    """An OSError aggregating every underlying failure of an operation.

    The first cause, if any, is chained as ``__cause__``. An empty cause
    list still yields a valid, raisable error.

    Attributes:
        causes: Underlying failures in the order they were encountered.
    """

    def __init__(self, message: str | None, causes: Sequence[BaseException] = ()) -> None:
        causes = tuple(causes)
        if message is None:
            message = _summarize(causes)
        super().__init__(message)
        self.message = message
        self.causes = causes
        if causes:
            self.__cause__ = causes[0]

    @classmethod
    def check_empty(cls, causes: Sequence[BaseException], message: str | None = None) -> None:
        """Raise a CompositeDeletionError if ``causes`` is not empty."""
        if causes:
            raise cls(message, causes)

    def cause(self, index: int) -> BaseException:
        """Get the cause at ``index``."""
        return self.causes[index]

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.causes)

    def __str__(self) -> str:
        return self.message

    def __reduce__(self) -> tuple[type, tuple[str, tuple[BaseException, ...]]]:
        return (type(self), (self.message, self.causes))


class NotADirectoryArgumentError(ValueError):
    """Raised when a directory operation is given something that is not a directory."""

    def __init__(self, path: object) -> None:
        super().__init__(f"{path} is not a directory.")
        self.path = path


def _summarize(causes: Sequence[BaseException]) -> str:
    return f"{len(causes):,d} exception(s): {[str(c) for c in causes]}"
