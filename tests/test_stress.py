import pytest

from kokoro_g2p.stress import (
    PRIMARY_STRESS, SECONDARY_STRESS, apply_stress, restress, stress_weight,
)


@pytest.mark.parametrize("ps", ["kˈæt", "nˌInˈtin", "ˌI", "ðə", "", "ʃ"])
def test_strong_negative_stress_removes_every_mark(ps):
    for stress in (-2, -1.5, -3):
        result = apply_stress(ps, stress)
        assert PRIMARY_STRESS not in result
        assert SECONDARY_STRESS not in result


def test_none_leaves_phonemes_alone():
    assert apply_stress("kˈæt", None) == "kˈæt"
    assert apply_stress(None, 2) is None


def test_demote_primary():
    assert apply_stress("nˌInˈtin", -1) == "nInˌtin"
    assert apply_stress("kˈæt", -0.5) == "kˌæt"
    assert apply_stress("kˈæt", 0) == "kˌæt"


def test_add_stress_to_unstressed_word():
    assert apply_stress("ðə", 0.5) == "ðˌə"
    assert apply_stress("ðə", 2) == "ðˈə"
    # Nothing to stress without a vowel
    assert apply_stress("ʃ", 2) == "ʃ"


def test_promote_secondary():
    assert apply_stress("ˌI", 1) == "ˈI"
    assert apply_stress("ˌI", 2) == "ˈI"


def test_restress_moves_marks_before_vowels():
    assert restress("ˈkæt") == "kˈæt"
    assert restress("ˌstɑp") == "stˌɑp"


def test_stress_weight_counts_diphthongs_twice():
    assert stress_weight("kæt") == 3
    assert stress_weight("bAt") == 4
    assert stress_weight("ʧʤ") == 4
    assert stress_weight("") == 0
    assert stress_weight(None) == 0
