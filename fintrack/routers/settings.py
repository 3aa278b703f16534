"""
Settings Router
Read and update the single user preferences record (currency, theme, notifications)
"""
import logging

from fastapi import APIRouter, Depends

from fintrack.core.dependencies import get_store
from fintrack.core.errors import ValidationError
from fintrack.db.memory import MemoryStore
from fintrack.models.settings import UserSettings, UserSettingsUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=UserSettings, include_in_schema=False)
@router.get("/", response_model=UserSettings)
def get_settings(store: MemoryStore = Depends(get_store)):
    return store.get_settings()


@router.put("", response_model=UserSettings, include_in_schema=False)
@router.put("/", response_model=UserSettings)
def update_settings(update: UserSettingsUpdate, store: MemoryStore = Depends(get_store)):
    """
    Merge the provided fields into the settings record. Omitted fields keep
    their current value.
    """
    changes = update.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")

    updated = store.update_settings(changes)
    logger.info(f"Settings updated: {sorted(changes)}")
    return updated
