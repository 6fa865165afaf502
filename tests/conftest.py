"""Shared fixtures: an in-memory backend and temporary git repositories."""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import git
import pytest

from blamelink.args_settings import SettingsFile
from blamelink.backend import BlameHunk, Commit, Person, VersionControlBackend
from blamelink.typedefs import OID, SHA, FileStr

AUTHOR = git.Actor("A. Author", "a@example.com")
# 2015-01-05 14:03:22 +01:00
AUTHOR_DATE = "1420463002 +0100"


class FakeBackend(VersionControlBackend):
    """In-memory backend that records every call to blame."""

    def __init__(
        self,
        root: Path,
        fstr2hunks: dict[FileStr, list[BlameHunk]] | None = None,
        ignored: set[FileStr] | None = None,
    ):
        self._root = root
        self.fstr2hunks = fstr2hunks or {}
        self.ignored = ignored or set()
        self.blame_calls: list[FileStr] = []

    @property
    def root(self) -> Path:
        return self._root

    def is_ignored(self, relative_fstr: FileStr) -> bool:
        return relative_fstr in self.ignored

    def blame(self, relative_fstr: FileStr) -> list[BlameHunk]:
        self.blame_calls.append(relative_fstr)
        if relative_fstr not in self.fstr2hunks:
            raise OSError(f"fatal: no such path {relative_fstr} in HEAD")
        return self.fstr2hunks[relative_fstr]

    def shorten(self, oid: OID) -> SHA:
        return oid[:7]


def make_commit(
    oid: OID = "1" * 40,
    parents: tuple[OID, ...] = (),
    message: str = "Add feature\n",
) -> Commit:
    return Commit(
        oid,
        Person("A. Author", "a@example.com"),
        datetime(2015, 1, 5, 14, 3, 22, tzinfo=timezone(timedelta(hours=1))),
        parents,
        message,
    )


@pytest.fixture(autouse=True)
def settings_dir(tmp_path_factory, monkeypatch):
    """Keep the settings file of the user out of the tests."""
    settings_dir = tmp_path_factory.mktemp("settings")
    monkeypatch.setattr(SettingsFile, "SETTINGS_DIR", settings_dir)
    return settings_dir


@pytest.fixture(autouse=True)
def restore_root_logger_level():
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    root_logger.setLevel(level)


@pytest.fixture
def repo_root(tmp_path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def fake_backend(repo_root) -> FakeBackend:
    commit = make_commit()
    return FakeBackend(
        repo_root,
        {
            "main.py": [BlameHunk(0, 3, commit)],
            "src/lib.py": [
                BlameHunk(0, 2, commit),
                BlameHunk(2, 4, make_commit("2" * 40, message="Fix lib\n")),
            ],
        },
        ignored={"build/out.py"},
    )


def commit_file(
    repo: git.Repo, fstr: FileStr, text: str, message: str, **kwargs
) -> git.Commit:
    path = Path(repo.working_tree_dir) / fstr  # type: ignore
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    repo.index.add([fstr])
    return repo.index.commit(
        message, author=AUTHOR, committer=AUTHOR, author_date=AUTHOR_DATE, **kwargs
    )


@pytest.fixture
def git_repo(tmp_path):
    """Repository with two commits on test.txt and a single commit on main.py."""
    repo_path = (tmp_path / "gitrepo").resolve()
    repo = git.Repo.init(repo_path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")

    commit_file(repo, "test.txt", "Line 1\n", "Add test.txt\n")
    commit_file(repo, "test.txt", "Line 1\nLine 2\nLine 3\n", "Extend test.txt\n")
    commit_file(repo, "main.py", "import sys\n\nprint(sys.argv)\n", "Add main.py\n")

    yield repo_path, repo
    repo.close()


@pytest.fixture
def merge_repo(git_repo):
    """git_repo plus a merge commit that adds merged.txt."""
    repo_path, repo = git_repo
    base = repo.head.commit
    main_tip = commit_file(repo, "main.txt", "main\n", "Work on main\n")

    # Commit on a side branch that does not move HEAD
    side_path = repo_path / "side.txt"
    side_path.write_text("side\n", encoding="utf-8")
    repo.index.add(["side.txt"])
    side_tip = repo.index.commit(
        "Work on side\n",
        parent_commits=[base],
        head=False,
        author=AUTHOR,
        committer=AUTHOR,
        author_date=AUTHOR_DATE,
    )

    merge = commit_file(
        repo,
        "merged.txt",
        "merged\n",
        "Merge branch 'side'\n",
        parent_commits=[main_tip, side_tip],
    )
    return repo_path, repo, merge
