"""Tests for secret masking."""

import pytest
from diaglog.channels.masking import (
    ELLIPSIS,
    SecretMasker,
    identity,
    mask_secrets,
)


class TestMaskSecrets:
    """Tests for the default sk- token mask."""

    def test_masks_token(self):
        """Should keep 7 leading and 4 trailing characters."""
        assert mask_secrets("sk-ABCDEFGHIJKLMNOP") == "sk-ABCD…MNOP"

    def test_masks_token_inside_text(self):
        masked = mask_secrets("Authorization: Bearer sk-abcdef0123456789 sent")
        assert masked == "Authorization: Bearer sk-abcd…6789 sent"

    def test_masks_every_token(self):
        masked = mask_secrets("a=sk-AAAAAAAAAAAAZZ b=sk-BBBBBBBBBBBBYY")
        assert masked == "a=sk-AAAA…AAZZ b=sk-BBBB…BBYY"

    def test_token_never_left_verbatim(self):
        """The full token must not survive masking."""
        token = "sk-Q1w2E3r4T5y6U7i8O9p0"
        masked = mask_secrets(f"key {token} end")
        assert token not in masked
        assert token[:7] in masked
        assert token[-4:] in masked

    def test_minimum_length_token(self):
        """Exactly 10 characters after the prefix is a secret."""
        assert mask_secrets("sk-0123456789") == "sk-0123" + ELLIPSIS + "6789"

    def test_short_token_passes_through(self):
        """Nine characters after the prefix is not a secret."""
        assert mask_secrets("sk-012345678") == "sk-012345678"

    def test_token_stops_at_non_alphanumeric(self):
        assert mask_secrets("sk-ABCDEFGHIJKL-rest") == "sk-ABCD…IJKL-rest"

    def test_plain_text_returns_same_object(self):
        """Text without the prefix should not be copied."""
        text = "nothing secret here"
        assert mask_secrets(text) is text

    def test_empty_string(self):
        assert mask_secrets("") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "plain",
            "sk-ABCDEFGHIJKLMNOP",
            "two sk-ABCDEFGHIJKLMNOP and sk-1234567890abcdef",
            "sk-ABCD…MNOP",
            "sk-sk-ABCDEFGHIJKLMNOP",
            "prefix only sk-",
            "sk-AAAAAAAAAAAsk-BBBBBBBBBBBB",
        ],
    )
    def test_idempotent(self, text):
        """Masking twice should equal masking once."""
        once = mask_secrets(text)
        assert mask_secrets(once) == once

    def test_adjacent_tokens_both_masked(self):
        """A token starting inside the previous token's run is masked too."""
        masked = mask_secrets("sk-AAAAAAAAAAAsk-BBBBBBBBBBBB")
        assert masked == "sk-AAAA…AAsk-BBBB…BBBB"
        assert "sk-BBBBBBBBBBBB" not in masked


class TestSecretMasker:
    """Tests for configurable maskers."""

    def test_custom_prefix(self):
        mask = SecretMasker(prefix="ghp_", min_length=12, head=8, tail=4)
        assert mask("token ghp_abcdefghijklmnop") == "token ghp_abcd…mnop"

    def test_prefix_is_literal(self):
        """Regex metacharacters in the prefix should match literally."""
        mask = SecretMasker(prefix="k.", min_length=10, head=4, tail=2)
        assert mask("kx0123456789") == "kx0123456789"
        assert mask("k.0123456789") == "k.01…89"

    def test_rejects_empty_prefix(self):
        with pytest.raises(ValueError):
            SecretMasker(prefix="")

    def test_rejects_head_that_would_rematch(self):
        """The kept head must not itself look like a secret."""
        with pytest.raises(ValueError):
            SecretMasker(prefix="sk-", min_length=4, head=7)

    def test_rejects_replacement_not_shorter_than_token(self):
        with pytest.raises(ValueError):
            SecretMasker(prefix="sk-", min_length=10, head=7, tail=5)


class TestIdentity:
    def test_returns_input(self):
        text = "sk-ABCDEFGHIJKLMNOP"
        assert identity(text) is text
