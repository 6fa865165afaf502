from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from logging import getLogger
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git import Commit as GitCommit
from git import Repo as GitRepo
from git.repo.base import BlameEntry

from blamelink.constants import DEFAULT_COPY_MOVE, DEFAULT_REV, IGNORE_REVS_FILES
from blamelink.typedefs import OID, SHA, Author, Email, FileStr, Rev

logger = getLogger(__name__)


class BackendError(Exception):
    """Base exception for version control backend errors."""


class RepositoryNotFoundError(BackendError):
    """Location is not inside a git repository with a working tree."""


@dataclass(frozen=True)
class Person:
    name: Author
    email: Email


@dataclass(frozen=True)
class Commit:
    oid: OID
    author: Person
    # Author date, timezone aware with the UTC offset of the author
    authored: datetime
    parents: tuple[OID, ...] = ()
    message: str = ""

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


# A BlameHunk is a range of consecutive lines in the final revision of a file that
# was last changed by a single commit. start is the zero-based index of the first
# line of the hunk.
@dataclass(frozen=True)
class BlameHunk:
    start: int
    line_count: int
    commit: Commit

    @property
    def end(self) -> int:
        # Zero-based index of the line after the hunk
        return self.start + self.line_count


class VersionControlBackend(ABC):
    """
    Everything a LineAttributor needs from a version control system.

    Relative paths are posix paths relative to the working tree root.
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        """Absolute, resolved path of the working tree root."""

    @abstractmethod
    def is_ignored(self, relative_fstr: FileStr) -> bool:
        """Return True if the path matches an ignore rule of the repository."""

    @abstractmethod
    def blame(self, relative_fstr: FileStr) -> list[BlameHunk]:
        """Return the blame hunks of the file, ordered by start line."""

    @abstractmethod
    def shorten(self, oid: OID) -> SHA:
        """Return the abbreviation of an object id that is used for display."""


class GitBackend(VersionControlBackend):
    # pylint: disable=too-many-arguments disable=too-many-positional-arguments
    def __init__(
        self,
        location: Path | str,
        rev: Rev = DEFAULT_REV,
        whitespace: bool = True,
        copy_move: int = DEFAULT_COPY_MOVE,
    ):
        try:
            self.git_repo: GitRepo = GitRepo(location, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryNotFoundError(
                f"No git repository found at {location}"
            ) from e
        if self.git_repo.working_tree_dir is None:
            raise RepositoryNotFoundError(
                f"Repository at {location} has no working tree"
            )

        self._root: Path = Path(self.git_repo.working_tree_dir).resolve()
        self.rev: Rev = rev
        self.whitespace: bool = whitespace
        if not 0 <= copy_move <= 4:
            raise ValueError(f"Unknown copy move level: {copy_move}")
        self.copy_move: int = copy_move

        self.oid2commit: dict[OID, Commit] = {}
        self.oid2sha: dict[OID, SHA] = {}

    @property
    def root(self) -> Path:
        return self._root

    def close(self) -> None:
        self.git_repo.close()

    # --no-index: tracked files that match an ignore rule count as ignored too.
    # git check-ignore exits with status 1 when the path is not ignored.
    def is_ignored(self, relative_fstr: FileStr) -> bool:
        try:
            self.git_repo.git.check_ignore("--no-index", "-q", relative_fstr)
        except GitCommandError as e:
            if e.status == 1:
                return False
            raise
        return True

    def blame(self, relative_fstr: FileStr) -> list[BlameHunk]:
        entries: list[BlameEntry] = list(
            self.git_repo.blame_incremental(
                self.rev, relative_fstr, **self._get_blame_opts()
            )
        )
        hunks: list[BlameHunk] = [
            BlameHunk(
                entry.linenos.start - 1,  # git blame line numbers start at 1
                len(entry.linenos),
                self._get_commit(entry.commit.hexsha),
            )
            for entry in entries
        ]
        hunks.sort(key=lambda hunk: hunk.start)
        logger.debug(f"{relative_fstr}: {len(hunks)} blame hunks")
        return hunks

    def shorten(self, oid: OID) -> SHA:
        if oid not in self.oid2sha:
            self.oid2sha[oid] = self.git_repo.git.rev_parse(oid, short=True)
        return self.oid2sha[oid]

    # Options are passed as keyword arguments to GitPython, which turns them into
    # command line options, e.g. w=True into -w and C=[True, True] into -C -C.
    def _get_blame_opts(self) -> dict[str, bool | str | list[bool]]:
        copy_move_int2opts: dict[int, dict[str, bool | list[bool]]] = {
            0: {},
            1: {"M": True},
            2: {"C": True},
            3: {"C": [True, True]},
            4: {"C": [True, True, True]},
        }
        blame_opts: dict[str, bool | str | list[bool]] = dict(
            copy_move_int2opts[self.copy_move]
        )
        if not self.whitespace:
            blame_opts["w"] = True
        for fname in IGNORE_REVS_FILES:
            ignore_revs_path = self.root / fname
            if ignore_revs_path.exists():
                blame_opts["ignore_revs_file"] = str(ignore_revs_path)
                break
        return blame_opts

    def _get_commit(self, oid: OID) -> Commit:
        if oid not in self.oid2commit:
            c: GitCommit = self.git_repo.commit(oid)
            message = c.message
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            self.oid2commit[oid] = Commit(
                c.hexsha,
                Person(c.author.name or "", c.author.email or ""),
                c.authored_datetime,
                tuple(parent.hexsha for parent in c.parents),
                message,
            )
        return self.oid2commit[oid]
