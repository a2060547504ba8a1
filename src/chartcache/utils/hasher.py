import hashlib


class Hasher:
    """
    Hasher provides static helpers for deriving stable digests from cache keys.

    Methods
    -------
    hash_string(input_string: str) -> str
        Returns a SHA256 hash of the input string.
    seed_from_string(input_string: str) -> int
        Returns a 64-bit integer seed derived from the SHA256 hash.
    """

    @staticmethod
    def hash_string(input_string: str) -> str:
        """Returns a SHA256 hash of the input string."""

        return hashlib.sha256(input_string.encode("utf-8")).hexdigest()

    @staticmethod
    def seed_from_string(input_string: str) -> int:
        """Returns a 64-bit integer seed for ``random.Random``."""

        return int(Hasher.hash_string(input_string)[:16], 16)
