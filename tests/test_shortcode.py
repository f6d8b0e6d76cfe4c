# tests/test_shortcode.py

import pytest

from qrlink.core.errors import ShortCodeGenerationError
from qrlink.core.shortcode import ALPHABET, generate_short_code


def test_code_shape():
    code = generate_short_code(lambda code: False)
    assert len(code) == 6
    assert all(ch in ALPHABET for ch in code)
    assert len(ALPHABET) == 62


def test_retries_past_taken_codes():
    seen = []

    def is_taken(code):
        seen.append(code)
        return len(seen) < 3

    code = generate_short_code(is_taken)
    assert len(seen) == 3
    assert code == seen[-1]


def test_gives_up_after_max_attempts():
    calls = []

    def always_taken(code):
        calls.append(code)
        return True

    with pytest.raises(ShortCodeGenerationError):
        generate_short_code(always_taken, max_attempts=10)
    assert len(calls) == 10
