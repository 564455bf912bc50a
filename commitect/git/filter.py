"""File Filter - Decide whether a saved file is worth analyzing."""

import os

from loguru import logger


BINARY_FILE_EXTENSIONS = frozenset({
    '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.ico', '.svg',
    '.pdf', '.zip', '.tar', '.gz', '.7z', '.rar',
    '.exe', '.dll', '.so', '.dylib',
    '.mp3', '.mp4', '.avi', '.mov', '.wmv',
    '.woff', '.woff2', '.ttf', '.eot',
    '.bin', '.dat', '.db', '.sqlite',
})

IGNORE_PATTERNS = (
    '/node_modules/',
    '/.git/',
    '/.vscode/',
    '/dist/',
    '/build/',
    '/.next/',
    '/coverage/',
    '/.nyc_output/',
)


def should_process(path: str) -> bool:
    """Return False for binary/media files and files under ignored directories."""
    ext = os.path.splitext(path)[1].lower()
    if ext in BINARY_FILE_EXTENSIONS:
        logger.debug(f"Skipping binary file: {path}")
        return False

    normalized = path.replace('\\', '/')
    if any(pattern in normalized for pattern in IGNORE_PATTERNS):
        logger.debug(f"Skipping ignored directory: {path}")
        return False

    return True
