"""Domain-specific exceptions: framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: object):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class PersistenceError(Exception):
    """Raised by a blob store when a key cannot be read or written."""

    def __init__(self, key: str, cause: Exception | None = None):
        self.key = key
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Persistence failure for key '{key}'{detail}")


class DecodeError(Exception):
    """Raised when persisted bytes cannot be turned back into entities."""

    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"Could not decode '{key}': {message}")
