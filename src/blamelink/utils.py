import argparse
from pathlib import Path
from typing import Any

from blamelink.typedefs import FileStr


def log(arg: Any, end: str = "\n", flush: bool = False):
    print(arg, end=end, flush=flush)


def get_version() -> str:
    my_dir = Path(__file__).resolve().parent
    version_file = my_dir / "version.txt"
    with open(version_file, "r", encoding="utf-8") as file:
        version = file.read().strip()
    return version


def get_digit(arg):
    try:
        arg = int(arg)
        if 0 <= arg < 10:
            return arg
        else:
            raise ValueError
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(
            f"Invalid value '{arg}', use a single digit integer >= 0."
        ) from e


def get_line_number(arg):
    try:
        arg = int(arg)
        if 1 <= arg:
            return arg
        else:
            raise ValueError
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(
            f"Invalid line number '{arg}', use an integer >= 1."
        ) from e


# Return the posix path of path relative to root, or None when path is not inside
# root. The test is done on path components, so that /repo2/file is not considered
# to be inside /repo.
def get_relative_fstr(path: Path, root: Path) -> FileStr | None:
    if path.is_relative_to(root):
        return path.relative_to(root).as_posix()
    else:
        return None
