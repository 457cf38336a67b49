"""Redaction of secret-shaped tokens in log text.

A secret token is a fixed literal prefix followed by at least ``min_length``
alphanumeric characters, e.g. ``sk-ABCDEFGHIJKLMNOP``. Each match is
shortened to its first ``head`` and last ``tail`` characters joined by an
ellipsis: ``sk-ABCD…MNOP``.
"""

import re
from typing import Callable

MaskFn = Callable[[str], str]

ELLIPSIS = "…"

DEFAULT_PREFIX = "sk-"
DEFAULT_MIN_LENGTH = 10
DEFAULT_HEAD = 7
DEFAULT_TAIL = 4


class SecretMasker:
    """Callable mask for one secret token shape.

    Usage:
        mask = SecretMasker(prefix="sk-")
        mask("key=sk-ABCDEFGHIJKLMNOP")  # 'key=sk-ABCD…MNOP'
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        min_length: int = DEFAULT_MIN_LENGTH,
        head: int = DEFAULT_HEAD,
        tail: int = DEFAULT_TAIL,
    ):
        """Initialize masker.

        Args:
            prefix: Literal text that starts every secret token
            min_length: Minimum alphanumeric run after the prefix
            head: Leading characters of the token kept verbatim
            tail: Trailing characters of the token kept verbatim
        """
        if not prefix:
            raise ValueError("prefix must not be empty")
        # The shortened form must not match again
        if head - len(prefix) >= min_length:
            raise ValueError("head must leave fewer than min_length characters after the prefix")
        if head + len(ELLIPSIS) + tail >= len(prefix) + min_length:
            raise ValueError("head and tail must be shorter than the shortest token")

        self.prefix = prefix
        self.min_length = min_length
        self.head = head
        self.tail = tail
        self._pattern = re.compile(
            re.escape(prefix) + "[A-Za-z0-9]{%d,}" % min_length
        )

    def _shorten(self, match: "re.Match[str]") -> str:
        token = match.group(0)
        return token[: self.head] + ELLIPSIS + token[-self.tail :]

    def __call__(self, text: str) -> str:
        if not text or self.prefix not in text:
            return text
        # A token can start inside the run of the one before it; repeat until
        # stable. Each substitution shortens the text, so this terminates.
        masked = self._pattern.sub(self._shorten, text)
        while masked != text:
            text = masked
            masked = self._pattern.sub(self._shorten, text)
        return masked

    def __repr__(self) -> str:
        return f"SecretMasker(prefix={self.prefix!r}, min_length={self.min_length})"


def identity(text: str) -> str:
    """Mask for channels that opt out of redaction."""
    return text


mask_secrets: MaskFn = SecretMasker()
