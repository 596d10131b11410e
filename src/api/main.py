import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from src.api.routes.billing import router as billing_router
from src.api.routes.organizations import router as organizations_router
from src.api.routes.webhooks import router as webhooks_router
from src.core.config import settings
from src.core.subscriptions.errors import WebhookRejection

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logging.basicConfig(level=settings.log_level.upper())
    yield


app = FastAPI(title="ClinicFlow API", lifespan=lifespan)
app.include_router(organizations_router, prefix="/api/v1")
app.include_router(billing_router, prefix="/api/v1")
app.include_router(webhooks_router, prefix="/api/v1")


@app.exception_handler(WebhookRejection)
async def webhook_rejection_handler(request: Request, exc: WebhookRejection) -> JSONResponse:
    if exc.retryable:
        logger.warning("Webhook delivery to %s failed, provider will retry: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    return {"status": "ok"}
