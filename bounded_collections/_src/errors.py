__all__ = ["SourceConsumedError"]


class SourceConsumedError(RuntimeError):
    """Raised by strict bounded sequences when a once-only source is traversed twice."""

    __slots__ = ()
