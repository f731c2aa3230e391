"""
Base service infrastructure.
"""

from bookstore.services.base.base_service import GenericService
from bookstore.services.base.service_result import ServiceResult

__all__ = ["GenericService", "ServiceResult"]
