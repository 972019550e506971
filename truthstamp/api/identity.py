"""Caller identity for API requests."""

from typing import Optional

from fastapi import Header

from .errors import MissingAccountError

ACCOUNT_HEADER = "X-Account-Address"


def get_caller_address(
    x_account_address: Optional[str] = Header(default=None, alias=ACCOUNT_HEADER),
) -> str:
    """FastAPI dependency for the acting account.

    The host verifies the request signature before it reaches the API; the
    address in the header is the identity that authorized this request.

    Raises:
        MissingAccountError: If the header is absent or empty
    """
    if not x_account_address:
        raise MissingAccountError(f"{ACCOUNT_HEADER} header is required")
    return x_account_address
