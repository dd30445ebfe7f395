"""
Module: api

Purpose:
    Async client for the exam service REST API, its connection settings
    and its error type.

Key Classes:
    - ClientConfig: Connection settings
    - ExamServiceClient: httpx-based client
    - BankFilters: Question bank query
    - ServiceError / ErrorType: Failed calls
"""

from .config import ClientConfig, load_client_config
from .errors import ErrorType, ServiceError
from .client import BankFilters, ExamServiceClient

__all__ = [
    "ClientConfig",
    "load_client_config",
    "ErrorType",
    "ServiceError",
    "BankFilters",
    "ExamServiceClient",
]
