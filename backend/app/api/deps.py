from fastapi import Depends, Request

from app.services.scan_processing import ScanProcessor
from app.store.base import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """Dependency for the document store the app was started with"""
    return request.app.state.store


def get_scan_processor(store: DocumentStore = Depends(get_store)) -> ScanProcessor:
    return ScanProcessor(store)
