from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from influencer_admin.brmh_api import BrmhTableClient
from influencer_admin.config import settings
from influencer_admin.deps import get_brmh_client
from influencer_admin.errors import AppError
from influencer_admin.routers import content, influencers, message_templates, orders, shopify, stats, webhooks
from influencer_admin.schemas import BrmhConnectionResponse
from influencer_admin.security import require_admin_token

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(location)
        if not field:
            return "Request body is missing or malformed"
        if error.get("type") == "missing":
            return f"Missing required field: {field}"
        return f"Invalid field {field}: {error.get('msg')}"
    return "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
        logger.warning(
            "Request failed",
            extra={"path": request.url.path, "method": request.method, "status_code": exc.status_code, "error": exc.message},
        )
        return ORJSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
        message = _validation_message(exc)
        logger.info("Rejected invalid request", extra={"path": request.url.path, "error": message})
        return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled server exception", exc_info=exc)
        return ORJSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    logging.getLogger("influencer_admin").setLevel(settings.LOG_LEVEL.upper())

    app = FastAPI(title="Influencer Admin API", default_response_class=ORJSONResponse)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(set(settings.BACKEND_CORS_ORIGINS)),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Degraded"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/brmh/test", response_model=BrmhConnectionResponse, dependencies=[Depends(require_admin_token)])
    async def brmh_test(client: BrmhTableClient = Depends(get_brmh_client)):
        return BrmhConnectionResponse(connected=await client.test_connection())

    app.include_router(influencers.router)
    app.include_router(orders.router)
    app.include_router(content.router)
    app.include_router(message_templates.router)
    app.include_router(stats.router)
    app.include_router(shopify.router)
    app.include_router(webhooks.router)

    return app


app = create_app()
