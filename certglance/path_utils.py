import os
import pathlib
from urllib.parse import urlparse
from urllib.request import url2pathname


def input_path(path_like: str | os.PathLike[str]) -> pathlib.Path:
    """
    Resolve a local path or ``file://`` URI to the certificate/CSR file to read.

    Raises ``FileNotFoundError`` or ``IsADirectoryError`` before any read so
    the MCP tool reports a clear error.
    """
    raw = str(path_like)
    if raw.startswith("file://"):
        raw = url2pathname(urlparse(raw).path)
    p = pathlib.Path(raw).expanduser().resolve(strict=False)
    if not p.exists():
        raise FileNotFoundError(f"no such certificate file: {p}")
    if p.is_dir():
        raise IsADirectoryError(f"expected a certificate file, got a directory: {p}")
    return p
