"""
Local hierarchical file store for asset attachments

Layout: <root>/<tenant>/<client>/[showrooms/<showroom>/]<entity>/<filename>
"""

import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Sequence[str]]


class StoragePathError(ValueError):
    """Path resolves outside the storage root"""
    pass


class LocalFileStorage:
    """Byte store rooted at a directory on local disk"""

    def __init__(self, root: Union[str, Path], url_prefix: str = "/uploads"):
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix.rstrip("/")

    def _resolve(self, path: PathLike) -> Path:
        parts = [path] if isinstance(path, str) else list(path)
        relative = PurePosixPath(*[str(part) for part in parts])
        target = (self.root / relative).resolve()
        if target != self.root and self.root not in target.parents:
            raise StoragePathError(f"Path escapes storage root: {relative}")
        return target

    def scoped_file(self, scope: Sequence[str], relative_path: str) -> Optional[Path]:
        """
        Locate a stored file that lies inside the given scope directory

        Returns:
            The file's absolute path, or None when it is missing, not a
            regular file, or outside scope (including traversal attempts)
        """
        try:
            directory = self._resolve(scope)
            target = self._resolve(relative_path)
        except StoragePathError:
            return None
        if directory not in target.parents or not target.is_file():
            return None
        return target

    def url_for(self, relative_path: str) -> str:
        return f"{self.url_prefix}/{relative_path}"

    def write(self, path: PathLike, data: bytes) -> str:
        """
        Write bytes, creating parent directories

        Returns:
            The stored file's path relative to the root
        """
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target.relative_to(self.root).as_posix()

    def delete(self, path: PathLike) -> bool:
        """Remove one file; a missing file is not an error"""
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        return True

    def delete_tree(self, path: PathLike) -> bool:
        """Remove a directory tree; a missing directory is not an error"""
        target = self._resolve(path)
        if target == self.root:
            raise StoragePathError("Refusing to delete the storage root")
        if not target.exists():
            return False
        shutil.rmtree(target)
        logger.info(f"Removed upload directory {target.relative_to(self.root).as_posix()}")
        return True

    def exists(self, path: PathLike) -> bool:
        return self._resolve(path).exists()
