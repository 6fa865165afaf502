from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Mapping
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag

from blamelink.backend import BlameHunk, Commit, VersionControlBackend
from blamelink.constants import (
    DEFAULT_SUBJECT,
    DISPLAY_PATH_KEY,
    FILE_PATH_KEY,
    LINE_NUMBER_KEY,
    SEPARATOR,
)
from blamelink.history_cache import HistoryCache
from blamelink.typedefs import OID, SHA, FileStr, Html

# English names, so that the date does not depend on the locale of the process.
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass
class LineContext:
    fstr: FileStr  # absolute path, or relative to the current directory
    line_nr: int  # starts at 1
    display_fstr: FileStr | None = None  # path shown in the mail body

    # Create a LineContext from the context dict of a host renderer, in which all
    # values are strings. Missing keys raise KeyError and a line number that is not an
    # integer raises ValueError.
    @classmethod
    def from_dict(cls, context: Mapping[str, str]) -> "LineContext":
        return cls(
            context[FILE_PATH_KEY],
            int(context[LINE_NUMBER_KEY]),
            context.get(DISPLAY_PATH_KEY),
        )


# Format a date like "Mon 05 Jan 14:03:22 2015 +01:00". Naive datetimes are taken
# to be in UTC.
def format_date(dt: datetime) -> str:
    offset: timedelta = dt.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return (
        f"{WEEKDAYS[dt.weekday()]} {dt.day:02} {MONTHS[dt.month - 1]} "
        f"{dt:%H:%M:%S} {dt.year:04} {sign}{minutes // 60:02}:{minutes % 60:02}"
    )


def format_commit(commit: Commit, shorten: Callable[[OID], SHA]) -> str:
    lines: list[str] = [f"commit {commit.oid}"]
    if commit.is_merge:
        lines.append(
            "Merge: " + " ".join(shorten(parent) for parent in commit.parents)
        )
    lines += [
        f"Author: {commit.author.name} <{commit.author.email}>",
        f"Date:   {format_date(commit.authored)}",
        "",
        commit.message,
        "",
    ]
    return "".join(line + "\n" for line in lines)


class LineAttributor:
    """
    Annotate source lines with a mailto link to the author of the last change.

    A LineAttributor belongs to a single repository and owns the blame cache for that
    repository. Only the first line of each blame hunk is annotated: a line gets a
    link when a hunk starts exactly at that line.
    """

    def __init__(
        self,
        backend: VersionControlBackend,
        subject: str = DEFAULT_SUBJECT,
        separator: str = SEPARATOR,
    ):
        self.backend: VersionControlBackend = backend
        self.subject: str = subject
        self.separator: str = separator
        self.cache: HistoryCache = HistoryCache(backend)
        self.soup = BeautifulSoup("", "html.parser")

    def resolve(self, context: LineContext) -> Html | None:
        if context.line_nr < 1:
            raise ValueError(f"Invalid line number {context.line_nr}, must be >= 1")
        path = Path(context.fstr).resolve()
        hunk = self.find_hunk(path, context.line_nr - 1)
        if hunk is None:
            return None
        body = self.get_body(
            self.format_context(path, context), self.format_commit(hunk.commit)
        )
        return self.get_mailto_link(hunk.commit, body)

    # Adapter for hosts that call visitors with a text fragment and a context dict.
    # The text itself is not used.
    def visit(
        self, text: str, context: Mapping[str, str]  # pylint: disable=unused-argument
    ) -> Html | None:
        return self.resolve(LineContext.from_dict(context))

    # Return the line numbers and links of the annotated lines of a file. Without
    # line_nrs, all lines of the file are tried.
    def annotate(
        self, fstr: FileStr, line_nrs: list[int] | None = None
    ) -> dict[int, Html]:
        if line_nrs is None:
            hunks = self.cache.get(Path(fstr).resolve())
            line_nrs = [hunk.start + 1 for hunk in hunks]
        line_nr2link: dict[int, Html] = {}
        for line_nr in line_nrs:
            link = self.resolve(LineContext(fstr, line_nr))
            if link is not None:
                line_nr2link[line_nr] = link
        return line_nr2link

    def find_hunk(self, path: Path, line_index: int) -> BlameHunk | None:
        hunks: list[BlameHunk] = self.cache.get(path)
        return next((hunk for hunk in hunks if hunk.start == line_index), None)

    def format_context(self, path: Path, context: LineContext) -> str:
        display_fstr = context.display_fstr
        if display_fstr is None:
            display_fstr = self.cache.relative_fstr(path) or path.as_posix()
        return f"File: {display_fstr}\nLine: {context.line_nr}"

    def format_commit(self, commit: Commit) -> str:
        return format_commit(commit, self.backend.shorten)

    def get_body(self, context_text: str, commit_text: str) -> str:
        return "\n\n".join(["", self.separator, context_text, commit_text])

    def get_mailto_link(self, commit: Commit, body: str) -> Html:
        email = quote(commit.author.email, safe="@")
        subject = quote(self.subject, safe="")
        a: Tag = self.soup.new_tag(
            "a", href=f"mailto:{email}?subject={subject}&body={quote(body, safe='')}"
        )
        a.string = commit.author.name
        return str(a)
