"""Storefront FastAPI application.

Commands are processed synchronously within the request. Every request runs
inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api import (
    analytics_router,
    order_router,
    product_router,
    register_error_handlers,
    user_router,
)
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context

# PROTEAN_ENV selects the domain.toml overlay (test, production)
storefront.init()

app = FastAPI(
    title="Storefront API",
    description="Catalog, order placement, fulfilment status and ratings",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and tag logs with a request id."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-ID", uuid4().hex), path=request.url.path)
    with storefront.domain_context():
        response = await call_next(request)
    return response


register_error_handlers(app)

app.include_router(user_router)
app.include_router(product_router)
app.include_router(order_router)
app.include_router(analytics_router)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
