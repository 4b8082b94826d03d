"""
StockScope Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from stockscope.services.base import BaseService, ServiceError, ValidationError, DataSourceError

__all__ = ["BaseService", "ServiceError", "ValidationError", "DataSourceError"]
