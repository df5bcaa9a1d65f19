"""Exception types raised by spacesaver.

Every error is synchronous and signals programmer or data error, never a
transient condition. Each class also derives from the builtin exception a
caller would naturally catch (``ValueError`` / ``TypeError``).
"""


class SpaceSaverError(Exception):
    """Base class for all spacesaver errors."""


class InvalidArgumentError(SpaceSaverError, ValueError):
    """An argument is outside its documented domain.

    Raised for a non-positive capacity, ``k > capacity`` in ``top(k)``,
    a zero planner estimate, a ``None`` element or a non-positive weight.
    """


class CorruptStateError(SpaceSaverError, ValueError):
    """A snapshot could not be restored into a valid table."""


class UnsupportedOperationError(SpaceSaverError, TypeError):
    """A read-only view was asked to mutate."""
