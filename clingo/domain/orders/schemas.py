"""Order domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ...shared.validators import validate_time_of_day
from .lifecycle import PAYMENT_METHODS


class SelectedOption(BaseModel):
    """One option chosen at checkout"""

    optionId: Union[int, str]
    quantity: int = Field(1, ge=1)


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None


class TimeSlot(BaseModel):
    start: str = "09:00"
    end: str = "12:00"

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class OrderCreate(BaseModel):
    """Schema for creating a new order"""

    serviceId: Union[int, str] = Field(validation_alias=AliasChoices("serviceId", "service"))
    selectedOptions: list[SelectedOption] = []
    totalAmount: float = Field(0, ge=0)
    tax: float = Field(0, ge=0)
    grandTotal: float = Field(0, ge=0)
    address: Optional[Address] = None
    scheduledDate: Optional[datetime] = None
    timeSlot: Optional[TimeSlot] = None
    paymentMethod: str = "card"
    gatewayOrderId: Optional[str] = Field(
        None, validation_alias=AliasChoices("gatewayOrderId", "paypalOrderId")
    )

    @field_validator("paymentMethod")
    @classmethod
    def validate_payment_method(cls, v):
        if v not in PAYMENT_METHODS:
            raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
        return v


class OrderStatusUpdate(BaseModel):
    """Schema for an explicit fulfillment status change"""

    status: str


class PaymentCapture(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None


class PaymentDetailsUpdate(BaseModel):
    transactionId: Optional[str] = None
    gatewayOrderId: Optional[str] = Field(
        None, validation_alias=AliasChoices("gatewayOrderId", "paypalOrderId")
    )
    gatewayPayerId: Optional[str] = Field(
        None, validation_alias=AliasChoices("gatewayPayerId", "paypalPayerId")
    )
    gatewayCapture: Optional[PaymentCapture] = Field(
        None, validation_alias=AliasChoices("gatewayCapture", "paypalCapture")
    )
    cardLast4: Optional[str] = None
    cardBrand: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    """Schema for a generic payment status update"""

    paymentStatus: str
    paymentDetails: Optional[PaymentDetailsUpdate] = None


class GatewayCallback(BaseModel):
    """Gateway capture result relayed by the client after checkout"""

    gatewayOrderId: Optional[str] = Field(
        None, validation_alias=AliasChoices("gatewayOrderId", "paypalOrderId")
    )
    gatewayPayerId: Optional[str] = Field(
        None, validation_alias=AliasChoices("gatewayPayerId", "paypalPayerId")
    )
    captureId: Optional[str] = None
    captureStatus: Optional[str] = None


# ============================================================================
# RESPONSES
# ============================================================================


class LineItemResponse(BaseModel):
    optionId: Union[int, str]
    name: str
    unitPrice: float
    quantity: int


class ServiceSummary(BaseModel):
    id: int
    name: str
    type: Optional[str] = None


class OwnerSummary(BaseModel):
    id: int
    name: str
    email: str


class OrderResponse(BaseModel):
    """Schema for order response"""

    id: str
    ownerId: int
    owner: Optional[OwnerSummary] = None
    serviceId: int
    service: Optional[ServiceSummary] = None
    lineItems: list[LineItemResponse]
    totalAmount: float
    tax: float
    grandTotal: float
    address: Optional[dict] = None
    scheduledDate: Optional[datetime] = None
    timeSlot: Optional[dict] = None
    status: str
    paymentStatus: str
    paymentMethod: str
    paymentDetails: Optional[dict] = None
    version: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class OrderEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    order: OrderResponse


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class OrderListEnvelope(BaseModel):
    success: bool = True
    orders: list[OrderResponse]
    pagination: Pagination


class AckResponse(BaseModel):
    success: bool = True
    message: str
