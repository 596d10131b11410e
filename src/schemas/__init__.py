from src.schemas.billing import BillingWebhookResponse, CheckoutRequest, CheckoutResponse
from src.schemas.organization import OrganizationAccessResponse

__all__ = [
    "BillingWebhookResponse",
    "CheckoutRequest",
    "CheckoutResponse",
    "OrganizationAccessResponse",
]
