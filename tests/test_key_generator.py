from __future__ import annotations

import pytest

from exam_app.constants.exam_constants import EXAM_KEY_ALPHABET
from exam_app.core.key_generator import KeyGenerator


def test_keys_use_the_expected_alphabet_and_length():
    key = KeyGenerator(seed=7).next_key()

    assert len(key) == 6
    assert all(character in EXAM_KEY_ALPHABET for character in key)


def test_seeded_generators_are_reproducible():
    assert KeyGenerator(seed=3).next_key() == KeyGenerator(seed=3).next_key()


def test_taken_keys_are_skipped():
    first = KeyGenerator(seed=11).next_key()

    second = KeyGenerator(seed=11).next_key(is_taken=lambda key: key == first)

    assert second != first


def test_gives_up_when_every_key_is_taken():
    with pytest.raises(RuntimeError):
        KeyGenerator(length=1, seed=1).next_key(is_taken=lambda key: True)


def test_length_must_be_positive():
    with pytest.raises(ValueError):
        KeyGenerator(length=0)
