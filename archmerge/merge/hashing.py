"""File content hashing used to compare duplicate entries."""

import hashlib
from pathlib import Path

SUPPORTED_ALGORITHMS = ("sha256", "sha1", "md5", "blake2b")

_CHUNK_SIZE = 64 * 1024


def hash_file(file_path: Path | str, algorithm: str = "sha256") -> str:
    """
    Hash file contents.

    Args:
        file_path: Path to file
        algorithm: One of SUPPORTED_ALGORITHMS

    Returns:
        Hexadecimal digest
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    hasher = hashlib.new(algorithm)
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)

    return hasher.hexdigest()
