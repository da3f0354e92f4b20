"""Custom exceptions for DocVault."""


class DocVaultError(Exception):
    """Base exception for DocVault."""
    pass


class ConfigurationError(DocVaultError):
    """Exception raised when a store client is missing required settings."""
    pass


class CollectionError(DocVaultError):
    """Exception raised when an object collection cannot be checked or created."""
    pass


class TransferError(DocVaultError):
    """Exception raised when writing a single object fails."""
    pass


class DocumentNotFoundError(DocVaultError):
    """Exception raised when a requested document does not exist."""

    def __init__(self, container: str, document_id: str):
        super().__init__(f"Document {document_id!r} not found in {container!r}")
        self.container = container
        self.document_id = document_id


class InvalidDocumentError(DocVaultError):
    """Exception raised when a document body is rejected."""
    pass


class UpstreamError(DocVaultError):
    """Exception raised when the document store backend fails."""
    pass
