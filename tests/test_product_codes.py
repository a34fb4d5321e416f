import random
import re

from services.models import DraftProduct
from services.product_codes import fill_missing_codes, generate_codes


def test_generate_codes_qr_format():
    t = 1718000000123
    codes = generate_codes('Blue Shirt', now_ms=t, rng=random.Random(1))

    assert codes.qr_code == f'QR-BLUESHIRT-{t}'


def test_generate_codes_barcode_is_timestamp_plus_three_digits():
    t = 1718000000123
    codes = generate_codes('Blue Shirt', now_ms=t, rng=random.Random(7))

    assert re.fullmatch(r'\d+\d{3}', codes.barcode)
    assert len(codes.barcode) == len(str(t)) + 3
    assert codes.barcode.startswith(str(t))


def test_generate_codes_zero_pads_random_suffix():
    class LowRandom:
        def randrange(self, stop):
            return 7

    codes = generate_codes('x', now_ms=5, rng=LowRandom())

    assert codes.barcode == '5007'


def test_generate_codes_strips_all_whitespace_runs():
    codes = generate_codes('  summer \t linen\nshirt ', now_ms=42, rng=random.Random(0))

    assert codes.qr_code == 'QR-SUMMERLINENSHIRT-42'


def test_fill_missing_codes_keeps_user_values():
    draft = DraftProduct(name='Blue Shirt', qr_code='MY-QR')

    filled = fill_missing_codes(draft, now_ms=99, rng=random.Random(3))

    assert filled.qr_code == 'MY-QR'
    assert filled.barcode.startswith('99')
    assert draft.barcode == ''


def test_fill_missing_codes_noop_when_both_present():
    draft = DraftProduct(name='Blue Shirt', qr_code='Q', barcode='B')

    assert fill_missing_codes(draft, now_ms=1) is draft
