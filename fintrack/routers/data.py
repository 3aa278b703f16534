"""
Data Management Router
Full snapshot export, clear-all reset and the supported currency list
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List

from fastapi import APIRouter, Depends

from fintrack.core.dependencies import get_store
from fintrack.db.memory import MemoryStore
from fintrack.models.export import ExportSnapshot

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/export", response_model=ExportSnapshot)
def export_data(store: MemoryStore = Depends(get_store)):
    """Everything currently stored, for client-side file generation."""
    return ExportSnapshot(**store.export_data(), exported_at=datetime.now(timezone.utc).isoformat())


@router.post("/clear-data")
def clear_data(store: MemoryStore = Depends(get_store)) -> Dict:
    store.clear_all()
    return {"message": "All data cleared successfully"}


@router.get("/currencies")
def list_currencies(store: MemoryStore = Depends(get_store)) -> List[Dict[str, str]]:
    return store.currencies.currencies()
