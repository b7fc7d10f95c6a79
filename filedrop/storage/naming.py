"""
filedrop/storage/naming.py

Random identifiers used as destination file names.

Every symbol is drawn independently with secrets.choice, which samples
the index with rejection (secrets.randbelow) so no symbol of the
64-character alphabet is favoured.
"""

from __future__ import annotations

import secrets

from filedrop.core.constants import NAME_ALPHABET
from filedrop.core.exceptions import EntropySourceUnavailableError


class NameGenerator:
    """
    Produces unbiased random strings from a fixed alphabet.

    Output is collision-unlikely, not collision-free: 10 symbols carry
    60 bits, far beyond what a single upload directory will ever hold.
    """

    def __init__(self, alphabet: str = NAME_ALPHABET) -> None:
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self._alphabet = alphabet

    def generate(self, length: int) -> str:
        """
        Return exactly ``length`` symbols from the alphabet.

        Raises:
            ValueError: If length is negative.
            EntropySourceUnavailableError: If the OS random source fails.
        """
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")

        try:
            return "".join(secrets.choice(self._alphabet) for _ in range(length))
        except (OSError, NotImplementedError) as exc:
            raise EntropySourceUnavailableError(
                f"Random source unavailable: {exc}"
            ) from exc

