# app/core/errors.py
"""
Error taxonomy for the storefront.

Every error is an HTTPException so services can raise it directly and
FastAPI renders it without extra handlers:

  ValidationError   -> 422, raised before any remote call
  NotFoundError     -> 404
  OutOfStock        -> 409, tracked stock is exhausted
  InsufficientStock -> 409, carries the remaining stock
  RemoteError       -> 502, any Supabase / PostgREST failure
  RateLimitError    -> 429, auth only, carries retry_after seconds
  AuthFailedError   -> 400, other auth failures
  CheckoutError     -> 502, a checkout step failed after validation
"""
from typing import Any

from fastapi import HTTPException, status

# Shown when the remote store gives us nothing readable
GENERIC_FAILURE_MESSAGE = "Terjadi kesalahan. Silakan coba lagi."


class StoreError(HTTPException):
    """Base class for all storefront errors."""

    http_status: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = GENERIC_FAILURE_MESSAGE

    def __init__(
        self,
        detail: Any = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=self.http_status,
            detail=detail if detail else self.default_detail,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(StoreError):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Data tidak valid."


class NotFoundError(StoreError):
    http_status = status.HTTP_404_NOT_FOUND
    default_detail = "Data tidak ditemukan."


class StockError(StoreError):
    http_status = status.HTTP_409_CONFLICT


class OutOfStock(StockError):
    default_detail = "Stok habis."


class InsufficientStock(StockError):
    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"Stok tidak cukup. Sisa stok: {remaining}.")


class RemoteError(StoreError):
    """
    Failure reported by the Supabase client (network, constraint,
    authorization). The raw message is kept when there is one.
    """

    http_status = status.HTTP_502_BAD_GATEWAY

    def __init__(self, detail: str | None = None, code: str | None = None):
        self.code = code
        super().__init__(detail)


class RateLimitError(StoreError):
    http_status = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            f"Terlalu banyak percobaan. Coba lagi dalam {retry_after} detik.",
            headers={"Retry-After": str(retry_after)},
        )


class AuthFailedError(StoreError):
    default_detail = "Gagal autentikasi."


class CheckoutError(StoreError):
    """
    A checkout step failed. When order_id is set the order row already
    exists and the remaining steps were not applied.
    """

    http_status = status.HTTP_502_BAD_GATEWAY
    default_detail = "Checkout gagal."

    def __init__(
        self,
        step: str,
        cause: Exception,
        order_id: str | None = None,
    ):
        self.step = step
        self.cause = cause
        self.order_id = order_id
        reason = getattr(cause, "detail", None) or str(cause) or self.default_detail
        super().__init__(
            {
                "message": str(reason),
                "step": step,
                "order_id": order_id,
            }
        )
