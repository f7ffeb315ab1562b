class CanonicalMapperError(Exception):
    """
    Base exception for all canonical mapper errors
    """
    pass


class DuplicateName(CanonicalMapperError):
    """
    Raised when a provider is added under a name that is already in use
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Provider name must be unique: '{name}' already exists.")


class InvalidInput(CanonicalMapperError):
    """
    Raised when uploaded or imported text is not parseable JSON
    """
    pass


class FormatError(CanonicalMapperError):
    """
    Raised when an import document lacks a required sequence field
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid dataset file: '{field}' is missing or is not a list.")


class StorageCorrupt(CanonicalMapperError):
    """
    Raised when the persisted snapshot cannot be read back
    """
    pass


class StorageError(CanonicalMapperError):
    """
    Raised when a snapshot cannot be written
    """
    pass
