from typing import List, Literal

from pydantic import BaseModel, Field, StrictInt

BookingStatus = Literal["Pending", "Confirmed", "Canceled", "Completed"]


class Review(BaseModel):
    client_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    created_at: int


class ServiceProvider(BaseModel):
    id: str
    name: str
    service_type: str
    contact_info: str
    created_at: int
    average_rating: int = 0
    reviews: List[Review] = Field(default_factory=list)
    availability: List[int] = Field(default_factory=list)


class Client(BaseModel):
    id: str
    name: str
    contact_info: str


class Booking(BaseModel):
    id: str
    service_provider_id: str
    client_id: str
    service_date: int
    service_type: str
    status: BookingStatus
    created_at: int


class ServiceProviderPayload(BaseModel):
    name: str
    service_type: str
    contact_info: str
    availability: List[StrictInt] = Field(default_factory=list)


class ClientPayload(BaseModel):
    name: str
    contact_info: str


class BookingPayload(BaseModel):
    service_provider_id: str
    client_id: str
    service_date: StrictInt
    service_type: str


class RescheduleRequest(BaseModel):
    new_date: StrictInt


class BookingStatusUpdateRequest(BaseModel):
    status: str


class ReviewPayload(BaseModel):
    booking_id: str
    rating: StrictInt
    comment: str = ""
