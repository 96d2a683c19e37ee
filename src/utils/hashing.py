"""SHA-256 hashing for config provenance and scene fingerprints.

Provides:
    - sha256_file(): Hash file contents (scene config YAML)
    - sha256_string(): Hash text
    - sha256_array(): Hash numpy array values (dtype and shape included)
    - hash_dict(): Hash JSON-serializable dict with sorted keys

Used for:
    - Logging which config file produced a scene
    - Scene fingerprints: identical (seed, size, config) -> identical digest
    - Golden-value comparisons in tests

Deterministic hashing:
    - Files read in chunks (1 MB default)
    - Dicts serialized with sorted keys and repr-exact floats
    - Results are hex strings (64 chars)

Usage:
    from src.utils import hashing
    cfg_hash = hashing.sha256_file("configs/space_paint/scene.v1.yaml")

Note: Module named `hashing.py` to avoid shadowing builtin `hash()`.
"""

import hashlib
import json
from pathlib import Path
from typing import Union

import numpy as np


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 hash of file contents.

    Parameters
    ----------
    path : Union[str, Path]
        File path
    chunk_size : int
        Read chunk size in bytes, default 1 MB

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256 = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b''):
            sha256.update(chunk)
    return sha256.hexdigest()


def sha256_string(s: str) -> str:
    """Compute SHA-256 hash of string.

    Examples
    --------
    >>> len(sha256_string("seed=1337"))
    64
    """
    return hashlib.sha256(s.encode('utf-8')).hexdigest()


def sha256_array(a: np.ndarray) -> str:
    """Compute SHA-256 hash of array values.

    Parameters
    ----------
    a : np.ndarray
        Array to hash (any shape, dtype)

    Returns
    -------
    str
        SHA-256 hex digest

    Notes
    -----
    Hash covers dtype and shape as well as the raw bytes, so an int32 and
    a float64 array with equal values hash differently.
    """
    a = np.ascontiguousarray(a)
    sha256 = hashlib.sha256()
    sha256.update(str(a.dtype).encode('utf-8'))
    sha256.update(str(a.shape).encode('utf-8'))
    sha256.update(a.tobytes())
    return sha256.hexdigest()


def hash_dict(d: dict) -> str:
    """Compute SHA-256 hash of dictionary (sorted keys).

    Parameters
    ----------
    d : dict
        Dictionary to hash (must be JSON-serializable)

    Returns
    -------
    str
        SHA-256 hex digest

    Notes
    -----
    Sorts keys for determinism. Floats are serialized with repr precision,
    so any bit-level difference in a value changes the digest.
    """
    json_str = json.dumps(d, sort_keys=True, separators=(',', ':'))
    return sha256_string(json_str)
