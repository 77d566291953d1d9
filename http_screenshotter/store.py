import hashlib
import os
import shutil
import tempfile
from pathlib import Path

from http_screenshotter.console import console
from http_screenshotter.models import StoredArtifact

CHUNK_SIZE = 64 * 1024


def sha256_file(path: Path) -> str:
    """Hex SHA-256 of the file at ``path``."""
    digest = hashlib.sha256()
    with open(path, "rb") as file:
        for chunk in iter(lambda: file.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def artifact_path(directory: str, digest: str) -> str:
    return f"{directory}/{digest}.png"


def publish(source: Path, directory: str) -> StoredArtifact:
    """Copy ``source`` into ``directory`` under its content hash.

    The copy lands in a sibling temp file first and is renamed into place, so
    ``<hash>.png`` is either absent or complete. Publishing identical content
    again replaces the file with the same bytes.
    """
    digest = sha256_file(source)
    path = artifact_path(directory, digest)

    fd, staging = tempfile.mkstemp(prefix=f".{digest}.", suffix=".png", dir=directory)
    os.close(fd)
    try:
        shutil.copy(source, staging)
        os.replace(staging, path)
    except BaseException:
        if os.path.exists(staging):
            os.unlink(staging)
        raise

    console.log(f"Stored {source} as {path}")
    return StoredArtifact(hash=digest, path=path)
