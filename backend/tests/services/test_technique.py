from types import SimpleNamespace

import pytest

from app.core.exceptions import TechniqueMismatchException
from app.services.technique import (
    derive_technique,
    find_technique_inconsistencies,
    slot_technique_key,
    technique_from_name,
    validate_booking_technique,
)


class TestSlotTechniqueKey:
    def test_handwork_techniques_share_molding_pool(self):
        assert slot_technique_key("hand_modeling") == "molding"
        assert slot_technique_key("painting") == "molding"
        assert slot_technique_key("molding") == "molding"

    def test_wheel_is_its_own_pool(self):
        assert slot_technique_key("potters_wheel") == "potters_wheel"

    def test_empty_defaults_to_wheel(self):
        assert slot_technique_key(None) == "potters_wheel"
        assert slot_technique_key("  ") == "potters_wheel"

    def test_unknown_technique_keeps_own_pool(self):
        assert slot_technique_key("Raku") == "raku"


class TestTechniqueFromName:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Clase de Torno", "potters_wheel"),
            ("Pintura de piezas", "painting"),
            ("Modelado a mano", "hand_modeling"),
            ("Experiencia Grupal", None),
            (None, None),
        ],
    )
    def test_keywords(self, name, expected):
        assert technique_from_name(name) == expected

    def test_painting_wins_over_wheel(self):
        # "Pintura" is checked before "torno"
        assert technique_from_name("Pintura de piezas de torno") == "painting"


def test_derive_technique_priority():
    assert derive_technique("Clase de Torno", fallback="painting") == "potters_wheel"
    assert derive_technique("Experiencia", fallback="painting") == "painting"
    assert derive_technique("Experiencia", details={"technique": "molding"}) == "molding"
    assert derive_technique("Experiencia") == "potters_wheel"


def test_validate_booking_technique_rejects_mismatch():
    with pytest.raises(TechniqueMismatchException) as exc_info:
        validate_booking_technique("Clase de Torno", "painting")
    assert exc_info.value.code == "technique_mismatch"


def test_validate_booking_technique_accepts_match_and_missing():
    assert validate_booking_technique("Clase de Torno", "potters_wheel") == "potters_wheel"
    assert validate_booking_technique("Clase de Torno", None) == "potters_wheel"
    assert validate_booking_technique("Experiencia Grupal", "molding") == "molding"


def test_find_technique_inconsistencies():
    bookings = [
        SimpleNamespace(
            id="b1",
            booking_code="C-1",
            technique="painting",
            product={"name": "Clase de Torno"},
        ),
        SimpleNamespace(
            id="b2",
            booking_code="C-2",
            technique="potters_wheel",
            product={"name": "Clase de Torno"},
        ),
        SimpleNamespace(id="b3", booking_code="C-3", technique="molding", product=None),
    ]

    issues = find_technique_inconsistencies(bookings)

    assert issues == [
        {
            "booking_id": "b1",
            "booking_code": "C-1",
            "product_name": "Clase de Torno",
            "stored": "painting",
            "expected": "potters_wheel",
        }
    ]
