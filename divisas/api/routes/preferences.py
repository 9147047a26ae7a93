"""Operator profile and onboarding endpoints."""

from fastapi import APIRouter, Depends

from divisas.api.deps import get_stores
from divisas.schemas.preferences import SetupRequest, UserPreferences
from divisas.storage.repositories import Stores

router = APIRouter(tags=["preferences"])


@router.get("/preferences", response_model=UserPreferences)
async def get_preferences(stores: Stores = Depends(get_stores)) -> UserPreferences:
    return await stores.preferences.read()


@router.put("/preferences", response_model=UserPreferences)
async def update_preferences(payload: UserPreferences, stores: Stores = Depends(get_stores)) -> UserPreferences:
    await stores.preferences.replace(payload)
    return payload


@router.post("/setup", response_model=UserPreferences)
async def complete_setup(payload: SetupRequest, stores: Stores = Depends(get_stores)) -> UserPreferences:
    """First-run onboarding: store the business profile and opening rates."""

    current = await stores.preferences.read()
    preferences = current.model_copy(
        update={
            "is_setup_completed": True,
            "user_name": payload.user_name.strip(),
            "business_name": payload.business_name.strip(),
            "slogan": payload.slogan.strip(),
            "dark_mode": payload.dark_mode,
        }
    )
    if payload.rates is not None:
        await stores.rates.replace(payload.rates.to_exchange_rate())
    await stores.preferences.replace(preferences)
    return preferences
