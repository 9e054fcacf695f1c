"""
UPI payment URI parsing.

QR codes for UPI payments carry a URI such as:

    upi://pay?pa=merchant@okaxis&pn=Merchant%20Name&mc=5411&tr=TXN123

Parameters:
- pa: payee address (VPA), the identifier that gets scored
- pn: payee name
- mc: merchant category code
- tr: transaction reference
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)

UPI_SCHEME = "upi"
UNKNOWN_PAYEE = "Unknown"


@dataclass(frozen=True)
class PaymentUri:
    """Parsed UPI payment URI."""

    vpa: str
    payee_name: str
    original: str
    merchant_code: Optional[str] = None
    transaction_ref: Optional[str] = None

    @property
    def has_payee_name(self) -> bool:
        return self.payee_name != UNKNOWN_PAYEE


def _first(params: dict[str, list[str]], key: str) -> Optional[str]:
    values = params.get(key)
    if not values:
        return None
    value = values[0].strip()
    return value or None


def parse_upi_uri(uri: str) -> Optional[PaymentUri]:
    """
    Parse a raw UPI payment URI.

    Args:
        uri: Scanned QR payload

    Returns:
        Parsed URI, or None if it is not a UPI URI or has no payee address
    """
    if not uri:
        return None

    text = uri.strip()
    if not text.lower().startswith(f"{UPI_SCHEME}://"):
        return None

    try:
        parts = urlsplit(text)
    except ValueError as e:
        logger.warning(f"Malformed UPI URI: {e}")
        return None

    params = parse_qs(parts.query)
    vpa = _first(params, "pa")
    if not vpa:
        return None

    return PaymentUri(
        vpa=vpa.lower(),
        payee_name=_first(params, "pn") or UNKNOWN_PAYEE,
        original=uri,
        merchant_code=_first(params, "mc"),
        transaction_ref=_first(params, "tr"),
    )
