"""Provider selection and API key endpoints. Keys are never returned in clear."""

from fastapi import APIRouter, Depends

from api.auth import verify_api_key
from api.dependencies import get_context
from api.models import ApiKeyRequest, ProviderKeyStatus, ProviderRequest, SettingsResponse
from shorts_factory.models import ProviderId
from shorts_factory.settings import mask_key

router = APIRouter()


def _settings_response(settings) -> SettingsResponse:
    keys = []
    for provider in ProviderId:
        key = settings.get_api_key(provider)
        keys.append(ProviderKeyStatus(
            provider=provider,
            configured=bool(key),
            masked_key=mask_key(key) if key else None,
        ))
    return SettingsResponse(provider=settings.get_provider(), keys=keys)


@router.get("/settings/provider", response_model=SettingsResponse)
async def get_provider(_key=Depends(verify_api_key), context=Depends(get_context)):
    return _settings_response(context.settings)


@router.put("/settings/provider", response_model=SettingsResponse)
async def set_provider(request: ProviderRequest, _key=Depends(verify_api_key), context=Depends(get_context)):
    context.settings.set_provider(request.provider)
    return _settings_response(context.settings)


@router.put("/settings/keys/{provider}", response_model=SettingsResponse)
async def set_key(
    provider: ProviderId,
    request: ApiKeyRequest,
    _key=Depends(verify_api_key),
    context=Depends(get_context),
):
    context.settings.set_api_key(provider, request.key)
    return _settings_response(context.settings)


@router.delete("/settings/keys/{provider}", response_model=SettingsResponse)
async def remove_key(provider: ProviderId, _key=Depends(verify_api_key), context=Depends(get_context)):
    context.settings.remove_api_key(provider)
    return _settings_response(context.settings)
