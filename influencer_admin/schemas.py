from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from influencer_admin.enums import (
    ContentStatusEnum,
    ContentTypeEnum,
    InfluencerStatusEnum,
    OrderStatusEnum,
)


class Influencer(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: str | None = None
    age: int | None = None
    gender: str | None = None
    address: str | dict[str, Any] | None = None
    socialMedia: dict[str, Any] = Field(default_factory=dict)
    categories: list[str] = Field(default_factory=list)
    status: str = InfluencerStatusEnum.PendingApproval.value
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class InfluencerCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str | None = None
    age: int | None = Field(default=None, ge=0)
    gender: str | None = None
    address: str | dict[str, Any] | None = None
    socialMedia: dict[str, Any] = Field(default_factory=dict)
    categories: list[str] = Field(default_factory=list)
    status: InfluencerStatusEnum = InfluencerStatusEnum.PendingApproval


class InfluencerUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    age: int | None = Field(default=None, ge=0)
    gender: str | None = None
    address: str | dict[str, Any] | None = None
    socialMedia: dict[str, Any] | None = None
    categories: list[str] | None = None
    status: InfluencerStatusEnum | None = None


class OrderProduct(BaseModel):
    id: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    image: str | None = None


class ShippingDetails(BaseModel):
    firstName: str = ""
    lastName: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""
    phone: str = ""
    email: str = ""


class DeliveryEvent(BaseModel):
    status: str
    timestamp: datetime
    location: str | None = None
    description: str | None = None


class TrackingInfo(BaseModel):
    status: str = "Processing"
    trackingNumber: str | None = None
    carrier: str | None = None
    trackingUrl: str | None = None
    estimatedDelivery: datetime | None = None
    lastUpdated: datetime | None = None
    deliveryHistory: list[DeliveryEvent] = Field(default_factory=list)


class Order(BaseModel):
    id: str
    influencerId: str
    companyId: str | None = None
    shopifyOrderId: str
    status: str = OrderStatusEnum.Created.value
    products: list[OrderProduct] = Field(default_factory=list)
    shippingDetails: ShippingDetails | None = None
    trackingInfo: TrackingInfo | None = None
    totalAmount: float | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class OrderCreate(BaseModel):
    influencerId: str = Field(min_length=1)
    shopifyOrderId: str = Field(min_length=1)
    companyId: str | None = None
    status: OrderStatusEnum = OrderStatusEnum.Created
    products: list[OrderProduct] = Field(default_factory=list)
    shippingDetails: ShippingDetails | None = None
    trackingInfo: TrackingInfo | None = None
    totalAmount: float | None = Field(default=None, ge=0)


class OrderUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: OrderStatusEnum | None = None
    shopifyOrderId: str | None = Field(default=None, min_length=1)
    products: list[OrderProduct] | None = None
    shippingDetails: ShippingDetails | None = None
    trackingInfo: TrackingInfo | None = None
    totalAmount: float | None = Field(default=None, ge=0)


class Shipment(BaseModel):
    status: str
    trackingNumber: str | None = None
    carrier: str | None = None
    trackingUrl: str | None = None
    estimatedDelivery: datetime | None = None
    deliveryHistory: list[DeliveryEvent] = Field(default_factory=list)
    lastUpdated: datetime
    orderStatus: str


class ShipmentResponse(BaseModel):
    success: bool = True
    shipment: Shipment


class Content(BaseModel):
    id: str
    type: str
    s3Link: str
    status: str = ContentStatusEnum.PendingUpload.value
    influencerId: str
    orderId: str
    companyId: str | None = None
    editedBy: str | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class ContentCreate(BaseModel):
    type: ContentTypeEnum
    s3Link: str = Field(min_length=1)
    status: ContentStatusEnum = ContentStatusEnum.PendingUpload
    influencerId: str = Field(min_length=1)
    orderId: str = Field(min_length=1)
    companyId: str | None = None
    editedBy: str | None = None


class ContentUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: ContentTypeEnum | None = None
    s3Link: str | None = Field(default=None, min_length=1)
    status: ContentStatusEnum | None = None
    editedBy: str | None = None


class MessageTemplate(BaseModel):
    id: str
    type: str
    message: str
    workflowCategory: str
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class MessageTemplateCreate(BaseModel):
    type: str = Field(min_length=1)
    message: str = Field(min_length=1)
    workflowCategory: str = Field(min_length=1)


class Stats(BaseModel):
    totalInfluencers: int
    activeOrders: int
    pendingContent: int
    completionRate: str


class CatalogVariant(BaseModel):
    variantId: int | str
    title: str
    price: float
    compareAtPrice: float | None = None
    stock: int = 0
    image: str | None = None


class CatalogProduct(BaseModel):
    id: int | str
    title: str
    thumbnail: str | None = None
    variants: list[CatalogVariant] = Field(default_factory=list)
    totalStock: int = 0


class ProductSearchResponse(BaseModel):
    products: list[CatalogProduct]
    nextPageInfo: str | None = None
    prevPageInfo: str | None = None


class ProductCountResponse(BaseModel):
    count: int


class CommerceLineItem(BaseModel):
    variant_id: int | str
    quantity: int = Field(ge=1)
    price: str


class CommerceShippingAddress(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    city: str = ""
    province: str = ""
    country: str = ""
    zip: str = ""
    phone: str | None = None


class CommerceOrderRequest(BaseModel):
    email: str | None = None
    shippingAddress: CommerceShippingAddress | None = None
    lineItems: list[CommerceLineItem] = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    note: str | None = None
    financialStatus: str = "pending"
    fulfillmentStatus: str | None = None


class CommerceOrderResponse(BaseModel):
    orderId: str | None = None


class BrmhConnectionResponse(BaseModel):
    connected: bool
