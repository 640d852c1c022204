from .classifier import MimeClassifier, normalize_content_type
from .naming import (
    ALPHABET,
    IdentifierGenerator,
    sanitize_filename,
    build_filename,
    build_path,
    identifier_of,
)

__all__ = [
    "MimeClassifier", "normalize_content_type",
    "ALPHABET", "IdentifierGenerator",
    "sanitize_filename", "build_filename", "build_path", "identifier_of",
]
