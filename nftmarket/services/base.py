# services/base.py
from typing import Optional


class MarketplaceError(Exception):
    """Base exception for marketplace client errors"""
    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self.message)
