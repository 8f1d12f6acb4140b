"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Input failed a precondition; field names the offending argument"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(DomainException):
    """Referenced bill or expense does not exist"""

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(DomainException):
    """Operation blocked by existing dependent records"""

    pass


class StorageError(DomainException):
    """Persistence store failed or is unavailable"""

    pass
