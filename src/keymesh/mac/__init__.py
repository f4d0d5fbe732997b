"""
Message Authentication Codes

Mac over HMAC-SHA2 keys.
"""

from .config import MAC_CATALOGUE_NAME, MacCatalogue, MacConfig
from .hmac import HmacKeyFormat, HmacKeyManager, HmacParams
from .wrapper import MacWrapper

__all__ = [
    "MAC_CATALOGUE_NAME",
    "MacCatalogue",
    "MacConfig",
    "HmacKeyFormat",
    "HmacKeyManager",
    "HmacParams",
    "MacWrapper",
]
