"""Domain-specific exceptions for the media delivery pipeline."""

from __future__ import annotations


class DeliveryError(Exception):
    """Base class for delivery-related errors."""


class AssetValidationError(DeliveryError):
    """Raised when a caller-supplied asset violates a precondition."""


class EmptyPayloadError(AssetValidationError):
    """Raised when the uploaded file carries no bytes."""


class UnsupportedMediaError(AssetValidationError):
    """Raised when the declared MIME type is not allowed."""


class PayloadTooLargeError(AssetValidationError):
    """Raised when the asset exceeds the configured size ceiling."""


class InvalidCategoryError(AssetValidationError):
    """Raised when the asset category is not one of the known tags."""


class InvalidEntityIdError(AssetValidationError):
    """Raised when the entity identifier is empty or unsafe for a remote path."""


class UploadReadError(AssetValidationError):
    """Raised when streaming the upload fails."""


class UploadFailed(DeliveryError):
    """Raised when every transport failed to store the asset."""

    def __init__(self, message: str, *, primary_reason: str | None = None) -> None:
        super().__init__(message)
        self.primary_reason = primary_reason
