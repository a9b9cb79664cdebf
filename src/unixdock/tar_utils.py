"""
TAR Archive utilities for Docker build contexts
"""

import io
import os
import tarfile


def create_build_context(dir_path: str) -> bytes:
    """
    Create a gzip-compressed tar archive of a build context directory

    Members are stored relative to dir_path, so the Dockerfile at the
    directory root ends up at the archive root.

    Args:
        dir_path: Build context directory

    Returns:
        Compressed archive as bytes

    Raises:
        NotADirectoryError: If dir_path is not a directory
    """
    if not os.path.isdir(dir_path):
        raise NotADirectoryError(f"Build context is not a directory: {dir_path}")

    tar_stream = io.BytesIO()

    with tarfile.open(fileobj=tar_stream, mode='w:gz', compresslevel=9) as tar:
        for root, dirs, files in os.walk(dir_path):
            dirs.sort()
            for file in sorted(files):
                file_path = os.path.join(root, file)
                arcname = os.path.relpath(file_path, dir_path)
                tar.add(file_path, arcname=arcname)

    return tar_stream.getvalue()
