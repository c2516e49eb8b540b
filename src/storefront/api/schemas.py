"""Pydantic request/response schemas for the storefront API.

Request schemas are deliberately lenient about missing or malformed
business fields: the domain decides which of those is an empty cart, an
incomplete address or an unknown payment method, and reports each with its
own error.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# --- Identity ---


class RegisterUserRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Ada Lovelace", "email": "ada@example.com"}]}}

    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)


class RegisterUserResponse(BaseModel):
    user_id: str
    token: str


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(id=str(user.id), name=user.name, email=user.email, role=user.role)


# --- Catalogue ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ceramic Pour-Over Set",
                    "description": "Dripper, carafe and two cups.",
                    "price": 42.5,
                    "category": "Kitchen",
                    "image_url": "https://images.example.com/pour-over.jpg",
                    "stock": 25,
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(
        None, max_length=500, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    stock: int = Field(0, ge=0)
    featured: bool = False
    discount: float = Field(0.0, ge=0, le=100)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    price: float | None = Field(None, ge=0)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(
        None, max_length=500, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    stock: int | None = Field(None, ge=0)
    featured: bool | None = None
    discount: float | None = Field(None, ge=0, le=100)


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    category: str | None = None
    image_url: str | None = None
    stock: int
    featured: bool
    discount: float
    average_rating: float
    total_ratings: int
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            image_url=product.image_url,
            stock=product.stock,
            featured=bool(product.featured),
            discount=product.discount or 0.0,
            average_rating=product.average_rating or 0.0,
            total_ratings=product.total_ratings or 0,
            created_at=product.created_at,
        )


class RateProductRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"stars": 4, "review": "Sturdy and pours well."}]}}

    stars: int
    review: str | None = None


class RatingSummaryResponse(BaseModel):
    average_rating: float
    total_ratings: int
    user_rating: int


class RatingResponse(BaseModel):
    user_id: str
    stars: int
    review: str | None = None
    created_at: datetime | None = None


class ProductRatingsResponse(BaseModel):
    average_rating: float
    total_ratings: int
    ratings: list[RatingResponse]


# --- Ordering ---


class OrderItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., validation_alias=AliasChoices("product", "product_id"))
    quantity: int


class ShippingAddressRequest(BaseModel):
    full_name: str | None = Field(None, validation_alias=AliasChoices("full_name", "fullName"))
    name: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = Field(None, validation_alias=AliasChoices("postal_code", "postalCode"))
    country: str | None = None


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product": "2d9c1a52-1b7e-4a57-9a55-1f0b6b1f2e11", "quantity": 2}],
                    "shipping_address": {
                        "full_name": "Ada Lovelace",
                        "address": "12 St James's Square",
                        "city": "London",
                        "postal_code": "SW1Y 4JH",
                        "country": "UK",
                    },
                    "payment_method": "credit_card",
                }
            ]
        }
    }

    items: list[OrderItemRequest] = []
    shipping_address: ShippingAddressRequest | None = Field(
        None, validation_alias=AliasChoices("shipping_address", "shippingAddress")
    )
    payment_method: str | None = Field(None, validation_alias=AliasChoices("payment_method", "paymentMethod"))


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    name: str
    unit_price: float
    quantity: int
    image_url: str | None = None
    rated: bool


class ShippingAddressResponse(BaseModel):
    full_name: str | None = None
    address: str
    city: str
    postal_code: str
    country: str


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[OrderItemResponse]
    shipping_address: ShippingAddressResponse
    payment_method: str
    subtotal: float
    shipping_cost: float
    total: float
    status: str
    is_paid: bool
    paid_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        address = order.shipping_address
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    image_url=item.image_url,
                    rated=bool(item.rated),
                )
                for item in order.items
            ],
            shipping_address=ShippingAddressResponse(
                full_name=address.full_name,
                address=address.address,
                city=address.city,
                postal_code=address.postal_code,
                country=address.country,
            ),
            payment_method=order.payment_method,
            subtotal=order.pricing.subtotal,
            shipping_cost=order.pricing.shipping_cost,
            total=order.pricing.total,
            status=order.status,
            is_paid=bool(order.is_paid),
            paid_at=order.paid_at,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
