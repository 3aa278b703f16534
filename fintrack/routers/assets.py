from typing import List

from fastapi import APIRouter, Depends, status

from fintrack.core.dependencies import get_store
from fintrack.core.errors import NotFoundError, ValidationError
from fintrack.db.memory import MemoryStore
from fintrack.models.asset import Asset, AssetCreate, AssetUpdate

router = APIRouter()


@router.get("", response_model=List[Asset], include_in_schema=False)
@router.get("/", response_model=List[Asset])
def list_assets(store: MemoryStore = Depends(get_store)):
    """Assets, most recently added first."""
    return store.list_assets()


@router.post("", response_model=Asset, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", response_model=Asset, status_code=status.HTTP_201_CREATED)
def create_asset(asset: AssetCreate, store: MemoryStore = Depends(get_store)):
    return store.create_asset(asset.model_dump())


@router.get("/{asset_id}", response_model=Asset)
def get_asset(asset_id: int, store: MemoryStore = Depends(get_store)):
    asset = store.get_asset(asset_id)
    if not asset:
        raise NotFoundError("Asset", asset_id)
    return asset


@router.put("/{asset_id}", response_model=Asset)
def update_asset(asset_id: int, asset_update: AssetUpdate, store: MemoryStore = Depends(get_store)):
    mutable_fields = asset_update.model_dump(exclude_unset=True)
    if not mutable_fields:
        raise ValidationError("No fields to update")

    updated = store.update_asset(asset_id, mutable_fields)
    if not updated:
        raise NotFoundError("Asset", asset_id)
    return updated


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(asset_id: int, store: MemoryStore = Depends(get_store)):
    if not store.delete_asset(asset_id):
        raise NotFoundError("Asset", asset_id)
    return None
