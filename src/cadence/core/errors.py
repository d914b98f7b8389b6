"""Error taxonomy for the recurrence engine."""

from dataclasses import dataclass


class MalformedDateError(ValueError):
    """Raised when a stored date string is not a valid YYYY-MM-DD date."""

    def __init__(self, value: object):
        super().__init__(f"Malformed date: {value!r} (expected YYYY-MM-DD)")
        self.value = value


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while evaluating stored records.

    The offending entity is left out of the calculation; the diagnostic
    tells the caller which one and why.
    """

    entity_id: str
    field: str
    value: object
    message: str

    @classmethod
    def from_error(cls, entity_id: str, field: str, error: MalformedDateError) -> "Diagnostic":
        return cls(entity_id=entity_id, field=field, value=error.value, message=str(error))
