class QueueMincerError(Exception):
    """Base exception for all queue failures"""


class ImproperlyConfigured(QueueMincerError):
    """Invalid loader selection or loader configuration"""


class TemplateNotFound(QueueMincerError):
    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template `{template_id}` not found")


class SchemaMismatch(QueueMincerError):
    """Item does not match the item template"""


class StorageError(QueueMincerError):
    """Reading or writing the backing store failed"""

    def __init__(self, message: str, name: str | None = None) -> None:
        self.name = name
        super().__init__(message)


class FormatError(StorageError):
    """Backing content is not shaped as expected"""


class AuthenticationError(StorageError):
    """Missing or invalid credentials for a remote store"""
