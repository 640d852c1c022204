import random
import re
import string

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9\-._]")


class IdentifierGenerator:
    """Short random ids for compact URLs; collisions are possible and tolerated."""

    def __init__(self, min_length: int = 3, max_length: int = 6, rng: random.Random | None = None) -> None:
        if min_length < 1 or max_length < min_length:
            raise ValueError("invalid identifier length range")
        self.min_length = min_length
        self.max_length = max_length
        self._rng = rng or random.Random()

    def generate(self, length: int | None = None) -> str:
        if length is None:
            length = self._rng.randint(self.min_length, self.max_length)
        if length < 1:
            raise ValueError("length must be >= 1")
        return "".join(self._rng.choice(ALPHABET) for _ in range(length))


def sanitize_filename(name: str) -> str:
    """Whitespace runs become `-`, then anything outside [A-Za-z0-9-._] is dropped."""
    return _DISALLOWED.sub("", _WHITESPACE.sub("-", name))


def build_filename(identifier: str, original_name: str) -> str:
    return sanitize_filename(f"{identifier}_{original_name}")


def build_path(category: str, identifier: str, original_name: str) -> str:
    return f"{category}/{build_filename(identifier, original_name)}"


def identifier_of(filename: str) -> str:
    """The id prefix of a stored filename (`abc_photo.png` -> `abc`)."""
    return filename.split("_", 1)[0]
