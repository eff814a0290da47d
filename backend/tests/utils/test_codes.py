from datetime import datetime

import pytest

from app.utils.codes import (
    BASE36_ALPHABET,
    generate_booking_code,
    generate_giftcard_code,
    random_base36,
    to_base36,
)


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"


def test_to_base36_rejects_negative():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_random_base36_alphabet():
    value = random_base36(32)
    assert len(value) == 32
    assert set(value) <= set(BASE36_ALPHABET)


def test_generate_booking_code_shape():
    code = generate_booking_code("C-ALMA-", now=datetime(2030, 1, 7, 10, 0))
    assert code.startswith("C-ALMA-")
    assert len(code) == len("C-ALMA-") + 8
    assert code == code.upper()


def test_generate_giftcard_code_shape():
    code = generate_giftcard_code("GC-", 6)
    assert code.startswith("GC-")
    assert len(code) == 9
