"""Authentication against provider-issued tokens."""

from .dependencies import (
    AuthContext,
    CurrentUser,
    PageUser,
    LoginRequired,
    get_current_user,
    get_page_user,
)
from .jwt import TokenData, decode_token

__all__ = [
    "AuthContext",
    "CurrentUser",
    "PageUser",
    "LoginRequired",
    "get_current_user",
    "get_page_user",
    "TokenData",
    "decode_token",
]
