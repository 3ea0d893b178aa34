"""
Module: delivery.py
Description: Delivery data models for the Postmates API.

Defines the delivery record shared by the paginated retrieval engine
and the webhook pipeline, together with the quote, page and outbound
spot shapes used by the one-shot API calls.

Key Components:
- Delivery: Job record identified by id and status
- DeliveryPage: One page of a cursor-paginated delivery listing
- DeliveryQuote: Fee and ETA quote for a prospective delivery
- DeliverySpot, Manifest: Inputs for creating a delivery
- DeliveryStatus, VehicleType, RelationshipType: Known enum values

Dependencies: pydantic, datetime, typing, enum
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


DELIVERY_KIND = "delivery"
DELIVERY_QUOTE_KIND = "delivery_quote"

ONGOING_FILTER = "ongoing"
ALL_FILTER = ""

# limit sentinel for "follow the cursor until the collection ends"
ALL_DELIVERIES = -1


class DeliveryStatus(str, Enum):
    """Lifecycle states reported by the remote system."""

    PENDING = "pending"                  # accepted, courier being assigned
    PICKUP = "pickup"                    # courier en route to pickup
    PICKUP_COMPLETE = "pickup_complete"  # courier has the items
    DROPOFF = "dropoff"                  # courier en route to dropoff
    CANCELED = "canceled"
    DELIVERED = "delivered"
    RETURNED = "returned"                # a return job was created, see related_deliveries


class VehicleType(str, Enum):
    """Courier vehicle types."""

    BICYCLE = "bicycle"
    CAR = "car"
    VAN = "van"
    TRUCK = "truck"
    SCOOTER = "scooter"
    MOTORCYCLE = "motorcycle"


class RelationshipType(str, Enum):
    """How a related delivery is linked to this one."""

    ORIGINAL = "original"  # forward leg
    RETURNED = "returned"  # return leg


class _RemoteModel(BaseModel):
    """Base for shapes decoded from the remote API."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _null_as_missing(cls, data):
        """An explicit null decodes like an absent field: to its default."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Location(_RemoteModel):
    lat: float = 0.0
    lng: float = 0.0


class Address(_RemoteModel):
    city: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    street_address_1: Optional[str] = None
    street_address_2: Optional[str] = None
    zip_code: Optional[str] = None


class Spot(_RemoteModel):
    """Pickup or dropoff location as reported on a delivery."""

    address: Optional[str] = None
    detailed_address: Optional[Address] = None
    location: Optional[Location] = None
    name: Optional[str] = None
    notes: Optional[str] = None
    phone_number: Optional[str] = None


class Courier(_RemoteModel):
    name: Optional[str] = None
    img_href: Optional[str] = None
    phone_number: Optional[str] = None
    vehicle_type: Optional[str] = None
    location: Optional[Location] = None


class Manifest(_RemoteModel):
    """
    Invoice of goods carried by a delivery.

    Attributes:
        description: Free form body describing the package
        reference: Identifier the courier can reference at pickup
    """

    description: str = Field(default="", description="Package description")
    reference: Optional[str] = Field(default=None, description="Developer provided reference")


class RelatedDelivery(_RemoteModel):
    id: str = ""
    relationship: Optional[str] = None


class Delivery(_RemoteModel):
    """
    Delivery record as returned by the remote system.

    Only the id and status are interpreted by the tracker; every other
    field is carried through untouched. Missing or null fields decode
    to their zero values, so partial snapshots embedded in webhook
    events are accepted. Records are snapshots: the tracker never
    mutates or writes them back.
    """

    kind: str = Field(default=DELIVERY_KIND, description="Record kind")
    id: str = Field(default="", description="Unique delivery identifier")
    status: str = Field(default="", description="Current delivery status")
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    pickup_eta: Optional[datetime] = None
    dropoff_eta: Optional[datetime] = None
    dropoff_deadline: Optional[datetime] = Field(
        default=None,
        description="Customer service is notified when dropoff_eta passes this deadline"
    )
    complete: bool = Field(default=False, description="False while further updates are expected")
    courier: Optional[Courier] = None
    currency: Optional[str] = None
    customer_signature_img_href: Optional[str] = None
    pickup: Optional[Spot] = None
    dropoff: Optional[Spot] = None
    dropoff_identifier: Optional[str] = None
    fee: Optional[int] = Field(default=None, description="Fee in cents")
    manifest: Optional[Manifest] = None
    quote_id: Optional[str] = None
    related_deliveries: List[RelatedDelivery] = Field(default_factory=list)
    live_mode: bool = False


class DeliveryPage(_RemoteModel):
    """
    One page of a delivery listing.

    Attributes:
        data: Records on this page, in server order
        next_href: Cursor for the next page; empty or missing at the end
        total_count: Server hint of the collection size (advisory only)
    """

    object: Optional[str] = None
    url: Optional[str] = None
    next_href: Optional[str] = None
    total_count: int = 0
    data: List[Delivery] = Field(default_factory=list)

    @property
    def has_next(self) -> bool:
        return bool(self.next_href)


class DeliveryQuote(_RemoteModel):
    """Quote for a prospective delivery."""

    kind: str = DELIVERY_QUOTE_KIND
    id: str
    created: Optional[datetime] = None
    expires: Optional[datetime] = Field(default=None, description="Quote is refused after this time")
    dropoff_eta: Optional[datetime] = None
    duration: int = Field(default=0, description="Estimated minutes to reach dropoff")
    currency: Optional[str] = None
    fee: int = Field(default=0, description="Fee in cents charged if a delivery is created")


class DeliverySpot(BaseModel):
    """Pickup or dropoff description sent when creating a delivery."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    business_name: Optional[str] = None
    notes: Optional[str] = None

    def form_fields(self, prefix: str) -> dict:
        """Render as the prefixed form fields the create endpoint expects."""
        return {
            f"{prefix}_name": self.name,
            f"{prefix}_address": self.address,
            f"{prefix}_phone_number": self.phone_number,
            f"{prefix}_business_name": self.business_name or "",
            f"{prefix}_notes": self.notes or "",
        }
