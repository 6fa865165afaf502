from logging import getLogger
from pathlib import Path

from blamelink.backend import BlameHunk, VersionControlBackend
from blamelink.typedefs import FileStr
from blamelink.utils import get_relative_fstr

logger = getLogger(__name__)


class HistoryCache:
    """
    Memoize the blame hunks of files in one repository.

    The blame of a file is computed at most once. Files outside the repository,
    ignored files and files for which the backend fails are stored with an empty
    list of hunks, so that they are not tried again.

    The cache assumes a single-threaded caller and a repository that does not change
    while the cache exists. A multi-threaded host must guard get() with a lock, else
    two threads can both miss and query the backend for the same file.
    """

    def __init__(self, backend: VersionControlBackend):
        self.backend: VersionControlBackend = backend
        self.root: Path = backend.root
        self.path2hunks: dict[Path, list[BlameHunk]] = {}

    def __len__(self) -> int:
        return len(self.path2hunks)

    def __contains__(self, path: Path) -> bool:
        return path in self.path2hunks

    def relative_fstr(self, path: Path) -> FileStr | None:
        return get_relative_fstr(path, self.root)

    # path must be absolute and resolved
    def get(self, path: Path) -> list[BlameHunk]:
        if path not in self.path2hunks:
            self.path2hunks[path] = self._compute(path)
        return self.path2hunks[path]

    def _compute(self, path: Path) -> list[BlameHunk]:
        relative_fstr = self.relative_fstr(path)
        if relative_fstr is None:
            logger.debug(f"{path} is outside repository {self.root}")
            return []
        try:
            if self.backend.is_ignored(relative_fstr):
                logger.debug(f"{relative_fstr} is ignored")
                return []
            return self.backend.blame(relative_fstr)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.info(f"Couldn't blame {path}: {e}")
            return []
