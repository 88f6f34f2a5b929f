"""One-time compression sweep over the artifact store directory."""

import gzip
import logging
import shutil
from pathlib import Path

from cli_download_server.config import CHUNK_SIZE, COMPRESSED_SUFFIX

logger = logging.getLogger(__name__)


def compress_file(path: Path) -> Path:
    """Gzip a single file next to itself and remove the original.

    Failing to remove the uncompressed original is logged and ignored;
    the compressed copy is already in place by then.

    Returns:
        Path of the compressed file
    """
    compressed = path.with_name(path.name + COMPRESSED_SUFFIX)
    logger.info(f"Compressing file; file name: {path}, compressed file name: {compressed}")
    with path.open("rb") as src, gzip.open(compressed, "wb") as dst:
        shutil.copyfileobj(src, dst, CHUNK_SIZE)

    logger.info(f"Removing the uncompressed file; file name: {path}")
    try:
        path.unlink()
    except OSError as err:
        logger.warning(f"Failed to remove the uncompressed file; file name: {path}; {err}")
    return compressed


def compress_files(store_dir: Path) -> list[Path]:
    """Compress every top-level regular file that is not already gzipped.

    Sub-directories and their contents are never touched.

    Args:
        store_dir: The flat artifact store directory

    Returns:
        Paths of the newly created ".gz" files, in name order

    Raises:
        OSError: If the directory can't be listed, or a file can't be read
            or its compressed copy can't be written
    """
    compressed: list[Path] = []
    for entry in sorted(store_dir.iterdir()):
        if not entry.is_file() or entry.name.endswith(COMPRESSED_SUFFIX):
            continue
        compressed.append(compress_file(entry))
    return compressed
