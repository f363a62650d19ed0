"""
FastAPI Application Entry Point

Bistro Boss restaurant backend over MongoDB.

Endpoints:
    - /users: accounts, admin promotion, admin-status lookup
    - /jwt: bearer token issue
    - /menus: menu items (writes are admin only)
    - /reviews: customer reviews (read only)
    - /carts: per-user shopping carts
    - /create-payment-intent, /payments: Stripe checkout
    - /admin-stats: dashboard counters and revenue
    - /health: system health check
"""

import logging
from datetime import datetime
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Body, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError

from bistro.core.config import get_settings, setup_logging
from bistro.core.exceptions import BistroError, NotFound
from bistro.core.security import (
    Claims,
    get_current_claims,
    issue_token,
    require_admin,
    self_or_deny,
    ADMIN_ROLE,
)
from bistro.database import (
    BistroDatabase,
    close_db,
    get_db,
    init_db,
    parse_object_id,
    serialize_document,
)
from bistro.schemas import (
    AdminStatusResponse,
    CartItemCreate,
    ClientSecretResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    InsertResponse,
    MenuItemCreate,
    PaymentCreate,
    PaymentIntentRequest,
    StatsResponse,
    TokenResponse,
    UpdateResponse,
    UserCreate,
    UserCreateResponse,
)
from bistro.services.payment import BasePaymentService, create_intent, get_payment_service
from bistro.services.stats import compute_stats

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.env_mode.value})")

    await init_db()
    logger.info(f"Database ready: {settings.mongodb_database}")

    payment_service = get_payment_service()
    logger.info(f"Payment Service: {payment_service.provider_name}")

    missing = settings.validate_production_config()
    if missing:
        logger.warning(f"Missing production config: {missing}")

    yield

    logger.info("Shutting down...")
    close_db()


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Restaurant management backend: users, menu, reviews, carts and payments.",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

async def list_documents(collection, query: Optional[dict] = None) -> list[dict[str, Any]]:
    documents = await collection.find(query or {}).to_list(length=None)
    return [serialize_document(doc) for doc in documents]


def insert_response(result) -> InsertResponse:
    return InsertResponse(acknowledged=result.acknowledged, insertedId=str(result.inserted_id))


def delete_response(result) -> DeleteResponse:
    return DeleteResponse(acknowledged=result.acknowledged, deletedCount=result.deleted_count)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    return {"message": f"Hello World! {settings.app_name}"}


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    db: BistroDatabase = Depends(get_db),
    payment_service: BasePaymentService = Depends(get_payment_service),
) -> HealthResponse:
    """Verify the store and the payment processor are reachable."""
    db_status = "healthy"
    try:
        await db.ping()
    except Exception as e:
        db_status = f"unhealthy: {e}"
        logger.error(f"Database health check failed: {e}")

    payment_status = "healthy" if await payment_service.health_check() else "unhealthy"

    overall = "operational" if db_status == payment_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        payment_service=payment_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# USER ENDPOINTS
# =============================================================================

@app.get("/users", tags=["Users"])
async def list_users(
    claims: Claims = Depends(require_admin),
    db: BistroDatabase = Depends(get_db),
) -> list[dict[str, Any]]:
    return await list_documents(db.users)


@app.post("/users", response_model=UserCreateResponse, tags=["Users"])
async def create_user(
    user: UserCreate,
    db: BistroDatabase = Depends(get_db),
) -> UserCreateResponse:
    """
    Register a user on first sign-in.

    Idempotent per email: the unique index plus a conditional upsert mean a
    repeat sign-in never inserts a second record.
    """
    document = user.to_document()
    # Roles are granted only through the admin promotion route
    document.pop("role", None)

    try:
        result = await db.users.update_one(
            {"email": document["email"]},
            {"$setOnInsert": document},
            upsert=True,
        )
    except DuplicateKeyError:
        result = None

    if result is None or result.upserted_id is None:
        logger.debug(f"User already exists: {document['email']}")
        return UserCreateResponse(message="user already exists", insertedId=None)

    logger.info(f"User created: {document['email']}")
    return UserCreateResponse(insertedId=str(result.upserted_id))


@app.delete("/users/{user_id}", response_model=DeleteResponse, tags=["Users"])
async def delete_user(
    user_id: str,
    claims: Claims = Depends(require_admin),
    db: BistroDatabase = Depends(get_db),
) -> DeleteResponse:
    result = await db.users.delete_one({"_id": parse_object_id(user_id)})
    logger.info(f"User {user_id} deleted by {claims.email} (count={result.deleted_count})")
    return delete_response(result)


@app.patch(
    "/users/admin/{user_id}",
    response_model=UpdateResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Users"],
)
async def make_admin(
    user_id: str,
    claims: Claims = Depends(require_admin),
    db: BistroDatabase = Depends(get_db),
) -> UpdateResponse:
    """Promote a user to the admin role."""
    result = await db.users.update_one(
        {"_id": parse_object_id(user_id)},
        {"$set": {"role": ADMIN_ROLE}},
    )
    if result.matched_count == 0:
        raise NotFound("User not found")

    logger.info(f"User {user_id} promoted to admin by {claims.email}")
    return UpdateResponse(
        acknowledged=result.acknowledged,
        matchedCount=result.matched_count,
        modifiedCount=result.modified_count,
        upsertedId=None,
    )


@app.get("/users/admin/{email}", response_model=AdminStatusResponse, tags=["Users"])
async def get_admin_status(
    email: str,
    claims: Claims = Depends(get_current_claims),
    db: BistroDatabase = Depends(get_db),
) -> AdminStatusResponse:
    self_or_deny(email, claims)

    user = await db.users.find_one({"email": email})
    admin = bool(user) and user.get("role") == ADMIN_ROLE
    return AdminStatusResponse(admin=admin)


# =============================================================================
# TOKEN ENDPOINT
# =============================================================================

@app.post("/jwt", response_model=TokenResponse, tags=["Auth"])
async def create_token(payload: dict[str, Any] = Body(...)) -> TokenResponse:
    """Sign the posted claims; the token is valid for one hour."""
    return TokenResponse(token=issue_token(payload))


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get("/menus", tags=["Menu"])
async def list_menu(db: BistroDatabase = Depends(get_db)) -> list[dict[str, Any]]:
    return await list_documents(db.menus)


@app.get("/menus/{item_id}", responses={404: {"model": ErrorResponse}}, tags=["Menu"])
async def get_menu_item(
    item_id: str,
    db: BistroDatabase = Depends(get_db),
) -> dict[str, Any]:
    item = await db.menus.find_one({"_id": parse_object_id(item_id)})
    if not item:
        raise NotFound("Item not found")
    return serialize_document(item)


@app.post("/menus", response_model=InsertResponse, tags=["Menu"])
async def create_menu_item(
    item: MenuItemCreate,
    claims: Claims = Depends(require_admin),
    db: BistroDatabase = Depends(get_db),
) -> InsertResponse:
    result = await db.menus.insert_one(item.to_document())
    logger.info(f"Menu item {result.inserted_id} created by {claims.email}")
    return insert_response(result)


@app.delete("/menus/{item_id}", responses={404: {"model": ErrorResponse}}, tags=["Menu"])
async def delete_menu_item(
    item_id: str,
    claims: Claims = Depends(require_admin),
    db: BistroDatabase = Depends(get_db),
) -> dict[str, int]:
    result = await db.menus.delete_one({"_id": parse_object_id(item_id)})
    if result.deleted_count != 1:
        raise NotFound("Item not found")

    logger.info(f"Menu item {item_id} deleted by {claims.email}")
    return {"deletedCount": result.deleted_count}


# =============================================================================
# REVIEW ENDPOINTS
# =============================================================================

@app.get("/reviews", tags=["Reviews"])
async def list_reviews(db: BistroDatabase = Depends(get_db)) -> list[dict[str, Any]]:
    return await list_documents(db.reviews)


# =============================================================================
# CART ENDPOINTS
# =============================================================================

@app.get("/carts", tags=["Carts"])
async def list_cart(
    email: Optional[str] = Query(None),
    db: BistroDatabase = Depends(get_db),
) -> list[dict[str, Any]]:
    """Cart items whose owner email equals the ``email`` query parameter."""
    return await list_documents(db.carts, {"email": email})


@app.post("/carts", response_model=InsertResponse, tags=["Carts"])
async def add_to_cart(
    item: CartItemCreate,
    db: BistroDatabase = Depends(get_db),
) -> InsertResponse:
    result = await db.carts.insert_one(item.to_document())
    return insert_response(result)


@app.delete("/carts/{item_id}", response_model=DeleteResponse, tags=["Carts"])
async def remove_from_cart(
    item_id: str,
    db: BistroDatabase = Depends(get_db),
) -> DeleteResponse:
    result = await db.carts.delete_one({"_id": parse_object_id(item_id)})
    return delete_response(result)


# =============================================================================
# PAYMENT ENDPOINTS
# =============================================================================

@app.post(
    "/create-payment-intent",
    response_model=ClientSecretResponse,
    responses={502: {"model": ErrorResponse}},
    tags=["Payments"],
)
async def create_payment_intent(
    request: PaymentIntentRequest,
    payment_service: BasePaymentService = Depends(get_payment_service),
) -> ClientSecretResponse:
    client_secret = await create_intent(request.price, payment_service)
    return ClientSecretResponse(clientSecret=client_secret)


@app.post("/payments", response_model=InsertResponse, tags=["Payments"])
async def record_payment(
    payment: PaymentCreate,
    claims: Claims = Depends(get_current_claims),
    db: BistroDatabase = Depends(get_db),
) -> InsertResponse:
    """Record a payment the client has already confirmed with the processor."""
    self_or_deny(payment.email, claims)

    document = payment.to_document()
    document.setdefault("date", datetime.now())

    result = await db.payments.insert_one(document)
    logger.info(f"Payment {result.inserted_id} recorded for {payment.email}: {payment.price}")
    return insert_response(result)


@app.get("/payments/{email}", tags=["Payments"])
async def list_payments(
    email: str,
    claims: Claims = Depends(get_current_claims),
    db: BistroDatabase = Depends(get_db),
) -> list[dict[str, Any]]:
    self_or_deny(email, claims)
    return await list_documents(db.payments, {"email": email})


# =============================================================================
# DASHBOARD ENDPOINTS
# =============================================================================

@app.get("/admin-stats", response_model=StatsResponse, tags=["Dashboard"])
async def admin_stats(db: BistroDatabase = Depends(get_db)) -> StatsResponse:
    stats = await compute_stats(db)
    return StatsResponse(**stats)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(BistroError)
async def bistro_error_handler(request: Request, exc: BistroError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or malformed body fields are client errors."""
    fields = [".".join(str(part) for part in err["loc"][1:]) or "body" for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"message": f"invalid or missing field(s): {', '.join(fields)}"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bistro.main:app", host=settings.api_host, port=settings.api_port)
