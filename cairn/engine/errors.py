"""
Exception types raised by the engine.

Only programming and content errors are exceptions. Things a player can
routinely trigger (a full bag, a missing target) are returned as values:
see ActionResult and the None returned by name lookups.
"""


class CairnError(Exception):
    """Base class for all engine errors."""


class UnitsError(CairnError, ValueError):
    """A magnitude string such as "10cm" could not be resolved."""


class ConfigurationError(CairnError):
    """
    A definition is structurally malformed.

    Fatal to the one object being constructed; during bulk loading the rest
    of the batch still proceeds.
    """

    def __init__(self, object_id: str, message: str) -> None:
        self.object_id = object_id
        self.message = message
        super().__init__(f"{message} (object={object_id})")


class ObjectNotFoundError(CairnError, KeyError):
    """No definition is known for the requested object ID."""

    def __init__(self, object_id: str) -> None:
        self.object_id = object_id
        super().__init__(object_id)

    def __str__(self) -> str:
        return f"No object definition with ID '{self.object_id}'"


class ObjectTypeMismatchError(CairnError, TypeError):
    """An object was created but is not of the requested variant."""

    def __init__(self, object_id: str, expected: type, actual: type) -> None:
        self.object_id = object_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Object '{object_id}' is a {actual.__name__}, expected {expected.__name__}"
        )


class ValidationError(CairnError):
    """
    One or more definitions failed to construct.

    Attributes:
        failures: Mapping of object ID to the exception its construction raised
    """

    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = dict(failures)
        lines = [f"{object_id}: {error}" for object_id, error in sorted(self.failures.items())]
        super().__init__(
            f"{len(self.failures)} object(s) failed validation:\n" + "\n".join(lines)
        )
