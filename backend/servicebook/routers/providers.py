from fastapi import APIRouter

from servicebook.models import Booking, ServiceProvider, ServiceProviderPayload
from servicebook.routers.store_errors import raise_store_http_error
from servicebook.services.booking_store import BookingStoreError, booking_store

router = APIRouter(prefix="/providers", tags=["providers"])


@router.post("", response_model=ServiceProvider)
def create_service_provider(payload: ServiceProviderPayload):
    try:
        return booking_store.create_provider(
            name=payload.name,
            service_type=payload.service_type,
            contact_info=payload.contact_info,
            availability=payload.availability,
        )
    except BookingStoreError as exc:
        raise_store_http_error(exc)


@router.get("", response_model=list[ServiceProvider])
def list_service_providers():
    return booking_store.list_providers()


@router.get("/{provider_id}", response_model=ServiceProvider)
def get_service_provider(provider_id: str):
    try:
        return booking_store.get_provider(provider_id)
    except BookingStoreError as exc:
        raise_store_http_error(exc)


@router.get("/{provider_id}/history", response_model=list[Booking])
def get_service_provider_history(provider_id: str):
    try:
        return booking_store.get_provider_history(provider_id)
    except BookingStoreError as exc:
        raise_store_http_error(exc)
