"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import shutil
from pathlib import Path
from typing import List

from encapsulation_linter.domain.protocols import FileSystemProtocol

_SOURCE_SUFFIXES = (".py", ".pyi")


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_python_files(self, path: str) -> List[str]:
        """Get all Python source and stub files in path (recursive if directory), sorted."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            return sorted(
                str(p) for p in path_obj.rglob("*")
                if p.suffix in _SOURCE_SUFFIXES and p.is_file()
            )
        return [str(path_obj)] if path_obj.suffix in _SOURCE_SUFFIXES else []

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        Path(path).write_text(content, encoding=encoding)

    def copy_file(self, src: str, dst: str) -> None:
        shutil.copy2(src, dst)

    def remove_file(self, path: str) -> None:
        Path(path).unlink(missing_ok=True)
