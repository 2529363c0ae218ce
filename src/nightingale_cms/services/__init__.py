from __future__ import annotations

from .bootstrap import DataInitializer, InitResult, init_data, reset_init_data
from .data_service import JsonFileDataService, OperationResult, get_data_service
from .document_io import load_document, write_document

__all__ = [
    "DataInitializer",
    "InitResult",
    "JsonFileDataService",
    "OperationResult",
    "get_data_service",
    "init_data",
    "load_document",
    "reset_init_data",
    "write_document",
]
