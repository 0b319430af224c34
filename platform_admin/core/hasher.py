"""Content digests used for drift detection."""
import hashlib
from pathlib import Path
from typing import Union


def hash_content(content: Union[bytes, str]) -> str:
    """Return the SHA-256 hex digest of content.

    Text is encoded as UTF-8 first, so hashing a rendered template and hashing
    the bytes written from it give the same digest.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def hash_file(path: Path) -> str:
    """Return the SHA-256 hex digest of a file's bytes."""
    return hash_content(Path(path).read_bytes())
