"""
Image file discovery and haystack/needle pairing.

A path argument is either one image file or a directory whose direct
children are candidate images. Haystacks and needles are paired by base
file name (name without its final extension).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from .constants import IMAGE_EXTENSIONS
from .exceptions import DirectoryScanError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchPair:
    """A haystack image and the needle sharing its base name."""
    haystack: Path
    needle: Path

    @property
    def base_name(self) -> str:
        return base_name(self.haystack.name)


def is_image_file(name: str) -> bool:
    """Check the extension against the recognized image types (case-insensitive)."""
    return name.lower().endswith(IMAGE_EXTENSIONS)


def base_name(file_name: str) -> str:
    """Strip the final extension; a leading dot does not start one."""
    dot_index = file_name.rfind('.')
    return file_name[:dot_index] if dot_index > 0 else file_name


def list_image_files(path: Union[str, Path]) -> List[Path]:
    """List candidate images for a file or directory argument.

    Args:
        path: Image file or directory

    Returns:
        Image paths sorted by file name; empty for a file with an
        unrecognized extension

    Raises:
        DirectoryScanError: If the path does not exist or the directory
            cannot be listed
    """
    path = Path(path)
    if path.is_dir():
        try:
            files = [entry for entry in path.iterdir()
                     if entry.is_file() and is_image_file(entry.name)]
        except OSError as e:
            raise DirectoryScanError(path, f"Failed to list directory {path}: {e}") from e
        return sorted(files, key=lambda p: p.name)

    if path.is_file():
        return [path] if is_image_file(path.name) else []

    raise DirectoryScanError(path, f"Path not found: {path}")


def pair_images(haystacks: Iterable[Path], needles: Iterable[Path]) -> List[MatchPair]:
    """Pair each haystack with the first needle of identical base name.

    Haystacks without a needle are left out. Pairs are sorted by haystack
    file name.
    """
    needles_by_name = {}
    for needle in needles:
        needles_by_name.setdefault(base_name(needle.name), needle)

    pairs = []
    for haystack in sorted(haystacks, key=lambda p: p.name):
        needle = needles_by_name.get(base_name(haystack.name))
        if needle is None:
            logger.info(f"No matching secondary image found for {haystack.name}")
            continue
        pairs.append(MatchPair(haystack=haystack, needle=needle))
    return pairs
