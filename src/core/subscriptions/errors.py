from __future__ import annotations

from fastapi import status


class WebhookRejection(Exception):
    """A webhook delivery the caller must be told about.

    ``retryable`` rejections map to a 5xx response so the provider redelivers;
    all others are terminal for the delivery attempt.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(WebhookRejection):
    pass


class MalformedPayloadError(WebhookRejection):
    pass


class TransientStoreError(WebhookRejection):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True


class TransientProviderError(WebhookRejection):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True


class UnresolvableTenantError(LookupError):
    pass


class UnsupportedStatusError(ValueError):
    def __init__(self, provider_status: str) -> None:
        super().__init__(f"Unsupported provider status: {provider_status!r}")
        self.provider_status = provider_status
