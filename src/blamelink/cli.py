import sys
from argparse import ArgumentParser
from logging import getLogger
from pathlib import Path

from blamelink import _logging
from blamelink.args_settings import Settings, SettingsFile
from blamelink.attributor import LineAttributor
from blamelink.backend import GitBackend, RepositoryNotFoundError
from blamelink.cli_arguments import define_arguments, hlp
from blamelink.utils import log

logger = getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings: Settings

    parser = ArgumentParser(prog="blamelink", description=hlp.help_doc)
    define_arguments(parser)
    namespace = parser.parse_args(argv)
    if namespace.verbosity is not None:
        namespace.verbosity = min(namespace.verbosity, 2)

    handler = _logging.ini_for_cli(namespace.verbosity)
    try:
        if namespace.show:
            SettingsFile.show()
            return 0

        if namespace.settings:
            settings, error = SettingsFile.load_from(namespace.settings)
            if error:
                logger.error(
                    f"--settings {namespace.settings}: Error loading settings: {error}"
                )
                return 1
        else:
            settings, error = SettingsFile.load()
            if error:
                logger.warning(f"Ignoring settings file: {error}")

        settings.update_with_namespace(namespace)
        _logging.set_logging_level_from_verbosity(settings.verbosity)

        if namespace.save:
            log(f"Settings saved to {settings.save()}.")

        if not namespace.fstr:
            if namespace.save:
                return 0
            parser.error("the following arguments are required: PATH")

        return annotate_file(
            namespace.fstr, namespace.line_nrs, namespace.repo, settings
        )
    finally:
        _logging.remove_cli_handler(handler)


def annotate_file(
    fstr: str, line_nrs: list[int], repo_fstr: str | None, settings: Settings
) -> int:
    path = Path(fstr).resolve()
    try:
        backend = GitBackend(
            repo_fstr if repo_fstr else path.parent,
            settings.rev,
            settings.whitespace,
            settings.copy_move,
        )
    except RepositoryNotFoundError as e:
        logger.error(str(e))
        return 1

    try:
        attributor = LineAttributor(backend, settings.subject, settings.separator)
        line_nr2link = attributor.annotate(str(path), line_nrs if line_nrs else None)
        if not line_nr2link:
            logger.info(f"No blame found for {fstr}")
        for line_nr, link in line_nr2link.items():
            log(f"{line_nr}: {link}")
    finally:
        backend.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
