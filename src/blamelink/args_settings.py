import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import jsonschema
import platformdirs
from git.types import PathLike

from blamelink.constants import (
    DEFAULT_COPY_MOVE,
    DEFAULT_REV,
    DEFAULT_SUBJECT,
    DEFAULT_VERBOSITY,
    SEPARATOR,
)
from blamelink.utils import log

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    subject: str = DEFAULT_SUBJECT
    separator: str = SEPARATOR
    rev: str = DEFAULT_REV
    whitespace: bool = True
    copy_move: int = DEFAULT_COPY_MOVE
    verbosity: int = DEFAULT_VERBOSITY

    def save(self) -> Path:
        settings_path = SettingsFile.get_location()
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        self.save_as(settings_path)
        return settings_path

    def save_as(self, pathlike: PathLike):
        settings_dict = asdict(self)
        jsonschema.validate(settings_dict, SettingsFile.SETTINGS_SCHEMA)
        with open(pathlike, "w", encoding="utf-8") as f:
            d = json.dumps(settings_dict, indent=4, sort_keys=True)
            f.write(d)

    def log(self):
        settings_dict = asdict(self)
        for key, value in settings_dict.items():
            key = key.replace("_", "-")
            log(f"{key:10}: {value!r}")

    # Overwrite the settings with the values that were given on the command line.
    # Options that were not given have value None in the namespace.
    def update_with_namespace(self, namespace: Namespace):
        nmsp_dict: dict = vars(namespace)
        for fld in fields(Settings):
            value = nmsp_dict.get(fld.name)
            if value is not None:
                setattr(self, fld.name, value)
        logger.debug(f"Settings after command line: {self}")


class SettingsFile:
    SETTINGS_FILE_NAME = "blamelink.json"
    SETTINGS_DIR = Path(platformdirs.user_config_dir("blamelink"))

    SETTINGS_SCHEMA: dict[str, Any] = {
        "type": "object",
        "properties": {
            "subject": {"type": "string"},
            "separator": {"type": "string"},
            "rev": {"type": "string", "minLength": 1},
            "whitespace": {"type": "boolean"},
            "copy_move": {"type": "integer", "minimum": 0, "maximum": 4},
            "verbosity": {"type": "integer", "minimum": 0, "maximum": 2},
        },
        "additionalProperties": False,
    }

    @classmethod
    def get_location(cls) -> Path:
        return cls.SETTINGS_DIR / cls.SETTINGS_FILE_NAME

    @classmethod
    def show(cls):
        path = cls.get_location()
        log(f"Settings file location: {path}")
        settings, error = cls.load()
        if error:
            log(f"Using default settings: {error}")
        settings.log()

    @classmethod
    def load(cls) -> tuple[Settings, str]:
        path = cls.get_location()
        if not path.exists():
            return Settings(), ""
        return cls.load_from(path)

    # Settings that are missing from the file get their default value. On any error,
    # the default settings are returned together with the error message.
    @classmethod
    def load_from(cls, file: PathLike) -> tuple[Settings, str]:
        try:
            path = Path(file)
            if path.suffix != ".json":
                raise ValueError(f"File {str(path)} does not have a .json extension")
            with open(file, "r", encoding="utf-8") as f:
                s = f.read()
                settings_dict = json.loads(s)
                jsonschema.validate(settings_dict, cls.SETTINGS_SCHEMA)
                settings = Settings(**settings_dict)
                return settings, ""
        except (
            ValueError,
            FileNotFoundError,
            json.decoder.JSONDecodeError,
            jsonschema.ValidationError,
        ) as e:
            return Settings(), str(e)
