from src.api.routes.billing import router as billing_router
from src.api.routes.organizations import router as organizations_router
from src.api.routes.webhooks import router as webhooks_router

__all__ = [
    "billing_router",
    "organizations_router",
    "webhooks_router",
]
