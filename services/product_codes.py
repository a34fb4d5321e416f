import random
import re
import time
from dataclasses import dataclass
from typing import Optional

from services.config import CODE_RANDOM_DIGITS
from services.models import DraftProduct

_WHITESPACE_RE = re.compile(r'\s+')


@dataclass(frozen=True)
class ProductCodes:
    qr_code: str
    barcode: str


def current_millis() -> int:
    return int(time.time() * 1000)


def generate_codes(name: str, now_ms: Optional[int] = None, rng: Optional[random.Random] = None) -> ProductCodes:
    """
    Derive a QR token and a numeric barcode from a product name and the clock.

    Args:
        name: Product name; whitespace is stripped and the rest upper-cased
        now_ms: Epoch milliseconds, defaults to the current time
        rng: Random source for the barcode suffix, defaults to the module RNG

    Returns:
        ProductCodes with ``QR-<NAME>-<ms>`` and ``<ms><3 random digits>``
    """
    if now_ms is None:
        now_ms = current_millis()
    source = rng or random
    upper_limit = 10 ** CODE_RANDOM_DIGITS

    qr_code = f"QR-{_WHITESPACE_RE.sub('', name).upper()}-{now_ms}"
    barcode = f'{now_ms}{source.randrange(upper_limit):0{CODE_RANDOM_DIGITS}d}'
    return ProductCodes(qr_code=qr_code, barcode=barcode)


def fill_missing_codes(draft: DraftProduct, now_ms: Optional[int] = None, rng: Optional[random.Random] = None) -> DraftProduct:
    """Fill empty QR/barcode fields, keeping any values the user typed in."""
    if draft.qr_code and draft.barcode:
        return draft
    codes = generate_codes(draft.name, now_ms=now_ms, rng=rng)
    return draft.model_copy(update={
        'qr_code': draft.qr_code or codes.qr_code,
        'barcode': draft.barcode or codes.barcode,
    })
