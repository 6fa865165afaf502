from argparse import ArgumentParser, BooleanOptionalAction
from dataclasses import dataclass

from blamelink.constants import DEFAULT_REV, DEFAULT_SUBJECT
from blamelink.utils import get_digit, get_line_number, get_version


@dataclass
class Help:
    help_doc: str = (
        "Print a mailto link to the author of the last change for lines of a file "
        "in a git repository. Only the first line of each blame hunk gets a link."
    )
    fstr: str = "File to annotate"
    line_nrs: str = "Line numbers to annotate, starting at 1 (default: all lines)"
    repo: str = "Repository folder (default: the folder of the file)"
    subject: str = f'Subject of the mail (default "{DEFAULT_SUBJECT}")'
    rev: str = f"Revision to blame (default {DEFAULT_REV})"
    whitespace: str = "Include whitespace changes in blame (default: include)"
    copy_move: str = (
        "0: ignore copies and moves, 1: detect moves within a file, 2: detect "
        "moves and copies in the same commit, 3: also in the commit that created "
        "the file, 4: in any commit"
    )
    verbosity: str = "More logging output, use -vv for debug output"
    settings: str = "Load settings from the JSON file PATH"
    save: str = "Save the resulting settings to the default settings file"
    show: str = "Show the default settings file location and its settings"
    version: str = "Show version and exit"


hlp = Help()


def define_arguments(parser: ArgumentParser):
    parser.add_argument(
        "fstr",
        nargs="?",
        metavar="PATH",
        help=hlp.fstr,
    )
    parser.add_argument(
        "line_nrs",
        nargs="*",
        type=get_line_number,
        metavar="LINE",
        help=hlp.line_nrs,
    )
    parser.add_argument(
        "-r",
        "--repo",
        type=str,
        metavar="DIR",
        help=hlp.repo,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=get_version(),
        help=hlp.version,
    )

    group_blame = parser.add_argument_group("Blame and mail options")
    group_blame.add_argument(
        "--subject",
        type=str,
        help=hlp.subject,
    )
    group_blame.add_argument(
        "--rev",
        type=str,
        help=hlp.rev,
    )
    group_blame.add_argument(
        "--whitespace",
        action=BooleanOptionalAction,
        help=hlp.whitespace,
    )
    group_blame.add_argument(
        "--copy-move",
        type=get_digit,
        choices=range(5),
        metavar="N",
        help=hlp.copy_move,
    )

    group_settings = parser.add_argument_group("Settings")
    group_settings.add_argument(
        "--settings",
        type=str,
        metavar="PATH",
        help=hlp.settings,
    )
    group_settings.add_argument(
        "--save",
        action="store_true",
        help=hlp.save,
    )
    group_settings.add_argument(
        "--show",
        action="store_true",
        help=hlp.show,
    )
    group_settings.add_argument(
        "-v",
        "--verbosity",
        action="count",
        help=hlp.verbosity,
    )
