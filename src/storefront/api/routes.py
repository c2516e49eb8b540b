"""FastAPI endpoints for the storefront."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.analytics.dashboard import build_dashboard
from storefront.api.dependencies import get_current_user, require_admin
from storefront.api.schemas import (
    CreateProductRequest,
    OrderResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductRatingsResponse,
    ProductResponse,
    RateProductRequest,
    RatingResponse,
    RatingSummaryResponse,
    RegisterUserRequest,
    RegisterUserResponse,
    StatusResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UserResponse,
)
from storefront.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct, get_product, list_products
from storefront.catalogue.rating import rate_product, ratings_for
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User
from storefront.ordering.order import Order
from storefront.ordering.placement import place_order
from storefront.ordering.status import UpdateOrderStatus
from storefront.ordering.visibility import all_orders, order_for_viewer, orders_for_user

user_router = APIRouter(prefix="/users", tags=["users"])
product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


# --- User endpoints ---


@user_router.post("", status_code=201, response_model=RegisterUserResponse)
async def register_user(body: RegisterUserRequest) -> RegisterUserResponse:
    user_id = current_domain.process(RegisterUser(name=body.name, email=body.email), asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)
    return RegisterUserResponse(user_id=user_id, token=user.api_token)


@user_router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_user(user)


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def browse_products(
    category: str | None = None,
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[ProductResponse]:
    return [ProductResponse.from_product(p) for p in list_products(category, offset, limit)]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def product_detail(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(get_product(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, admin: User = Depends(require_admin)) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        price=body.price,
        description=body.description,
        category=body.category,
        image_url=body.image_url,
        stock=body.stock,
        featured=body.featured,
        discount=body.discount,
        actor_role=admin.role,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, admin: User = Depends(require_admin)
) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        price=body.price,
        description=body.description,
        category=body.category,
        image_url=body.image_url,
        stock=body.stock,
        featured=body.featured,
        discount=body.discount,
        actor_role=admin.role,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id, actor_role=admin.role), asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/ratings", response_model=ProductRatingsResponse)
async def product_ratings(product_id: str) -> ProductRatingsResponse:
    product, ratings = ratings_for(product_id)
    return ProductRatingsResponse(
        average_rating=product.average_rating or 0.0,
        total_ratings=product.total_ratings or 0,
        ratings=[
            RatingResponse(user_id=str(r.user_id), stars=r.stars, review=r.review, created_at=r.created_at)
            for r in ratings
        ],
    )


@product_router.post("/{product_id}/rating", response_model=RatingSummaryResponse)
async def rate(
    product_id: str, body: RateProductRequest, user: User = Depends(get_current_user)
) -> RatingSummaryResponse:
    result = rate_product(product_id, user.id, body.stars, body.review)
    return RatingSummaryResponse(**result)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, user: User = Depends(get_current_user)) -> OrderResponse:
    order_id = place_order(
        user_id=user.id,
        user_name=user.name,
        items=[{"product_id": item.product_id, "quantity": item.quantity} for item in body.items],
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else {},
        payment_method=body.payment_method,
    )
    return OrderResponse.from_order(current_domain.repository_for(Order).get(order_id))


@order_router.get("/myorders", response_model=list[OrderResponse])
async def my_orders(
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    user: User = Depends(get_current_user),
) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in orders_for_user(user, offset, limit)]


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    admin: User = Depends(require_admin),
) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in all_orders(admin, offset, limit)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, user: User = Depends(get_current_user)) -> OrderResponse:
    return OrderResponse.from_order(order_for_viewer(order_id, user))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, admin: User = Depends(require_admin)
) -> OrderResponse:
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=body.status, actor_role=admin.role),
        asynchronous=False,
    )
    return OrderResponse.from_order(current_domain.repository_for(Order).get(order_id))


# --- Analytics ---


@analytics_router.get("")
async def dashboard(time_range: str = "month", admin: User = Depends(require_admin)) -> dict:  # noqa: ARG001
    return build_dashboard(time_range)
