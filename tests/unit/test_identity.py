"""Tests for the identity codec — reversibility, alphabet, strict decoding."""

from __future__ import annotations

import pytest

from chunkforge.core.errors import InvalidIdentityError, InvalidInputError
from chunkforge.core.identity import decode, encode, is_valid_identity


class TestEncode:
    def test_known_vector(self):
        assert encode("greeting.txt") == "Z3JlZXRpbmcudHh0"

    def test_no_padding(self):
        assert encode("a") == "YQ"

    @pytest.mark.parametrize(
        "name",
        [
            "report.pdf",
            "my holiday video.MOV",
            "naïve café.png",
            "日本語のファイル.zip",
            "dir/looking\\name.bin",
            "100% done?.txt",
            "emoji 🎉.gif",
        ],
    )
    def test_round_trip(self, name: str):
        identity = encode(name)
        assert decode(identity) == name

    @pytest.mark.parametrize("name", ["a/b/c", "..", "x?y#z", "a b+c"])
    def test_identity_is_path_and_url_safe(self, name: str):
        identity = encode(name)
        assert "/" not in identity
        assert "\\" not in identity
        assert "." not in identity
        assert is_valid_identity(identity)

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidIdentityError):
            encode("")


class TestDecode:
    @pytest.mark.parametrize("bad", ["", "abc$", "a.b", "has space", "Z3Jl=", "../etc"])
    def test_rejects_foreign_characters(self, bad: str):
        with pytest.raises(InvalidIdentityError):
            decode(bad)

    def test_rejects_impossible_length(self):
        with pytest.raises(InvalidIdentityError):
            decode("YQYQY")

    def test_rejects_non_canonical_trailing_bits(self):
        # "YR" carries the same byte as "YQ" with non-zero spare bits.
        assert decode("YQ") == "a"
        with pytest.raises(InvalidIdentityError):
            decode("YR")

    def test_rejects_non_utf8_payload(self):
        with pytest.raises(InvalidIdentityError, match="Failed to decode"):
            decode("_w")

    def test_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            decode("!!")
