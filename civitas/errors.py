"""Structured error hierarchy for civitas."""


class CivitasError(Exception):
    """Base for all civitas errors."""

    pass


class NotFoundError(CivitasError, LookupError):
    """Referenced entity id does not resolve."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: {entity_id}")


class InvalidStateError(CivitasError):
    """Record in invalid state for requested operation."""

    pass


class ValidationError(CivitasError, ValueError):
    """Input validation at boundary failed."""

    pass


class SerializationError(CivitasError):
    """Snapshot serialization/deserialization failed."""

    pass
