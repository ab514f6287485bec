"""
Write-once holder for the fingerprint of the loaded config file.
"""


class ContentHash:
    """Keeps the first non-empty hash code it is given.

    Later writes are ignored, so repeated loads within one process cannot
    change the identity of the config.
    """

    def __init__(self) -> None:
        self._hash_code = ""

    def new_hash_code(self, hash_code: str) -> str:
        """Store ``hash_code`` unless one is already set; return the stored value."""
        if not self._hash_code:
            self._hash_code = hash_code
        return self._hash_code

    def hash_code(self) -> str:
        return self._hash_code

    def is_set(self) -> bool:
        return self._hash_code != ""

    # Internal reset for testing ONLY
    def _reset_for_testing(self) -> None:
        self._hash_code = ""


_content_hash = ContentHash()


def get_content_hash() -> ContentHash:
    """Process-wide content hash holder."""
    return _content_hash


def new_hash_code(hash_code: str) -> str:
    return _content_hash.new_hash_code(hash_code)


def hash_code() -> str:
    return _content_hash.hash_code()
