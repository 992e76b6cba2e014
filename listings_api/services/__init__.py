"""
Service layer for business logic implementation.
Contains services for property and agent management, image lifecycle and error handling.
"""

from .image import ImageService, ImageReconciliation
from .property import PropertyService
from .agent import AgentService
from .error_handler import ErrorHandlerService

__all__ = [
    "ImageService",
    "ImageReconciliation",
    "PropertyService",
    "AgentService",
    "ErrorHandlerService"
]
