"""
Customer identity

Authentication is handled upstream (API gateway); the authenticated customer
arrives as a UUID in the X-Customer-Id header.
"""

from typing import Optional
from uuid import UUID

from fastapi import Header

from src.platform.exception.exceptions import AuthenticationError


async def get_current_customer_id(
    x_customer_id: Optional[str] = Header(default=None),
) -> UUID:
    if not x_customer_id:
        raise AuthenticationError('Missing X-Customer-Id header')
    try:
        return UUID(x_customer_id)
    except ValueError:
        raise AuthenticationError('Invalid X-Customer-Id header')
