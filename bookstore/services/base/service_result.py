"""
Service result pattern for standardized response handling.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from bookstore.core.exceptions import BookStoreError, ErrorCode

TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Standardized service operation result with success/failure pattern.

    Attributes:
        is_success: Operation success indicator
        data: Result data (if successful)
        error: The domain error that stopped the operation (if failed)
        message: Human-readable status message
        metadata: Additional context information
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[BookStoreError] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a successful result."""
        return cls(is_success=True, data=data, message=message, metadata=metadata or {})

    @classmethod
    def failure(
        cls,
        error: BookStoreError,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a failed result carrying ``error`` unchanged."""
        return cls(is_success=False, error=error, message=error.message, metadata=metadata or {})

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.error_code if self.error else None

    def unwrap(self) -> TData:
        """
        Return the data, or raise the carried error if the operation failed.

        Raises:
            BookStoreError: The same error object stored in ``error``
        """
        if not self.is_success:
            raise self.error
        return self.data

    def __bool__(self) -> bool:
        return self.is_success
