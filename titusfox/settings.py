"""Game settings read from the ``titus.conf`` configuration file.

The file is line based: the first word of a line is a command, the
following words are its arguments. Lines whose first word starts with
``#`` are comments. Unknown commands are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple, TypeVar, Union

CONFIG_FILE = "titus.conf"
MAX_LEVELS = 16
MODULE_LEVEL_FILE_COUNT = 6

_COMMAND_WIDTH = 50
_VALUE_WIDTH = 255
_INDEX_WIDTH = 2
_C_WHITESPACE = " \t\n\v\f\r"

_log = logging.getLogger(__name__)

_T = TypeVar("_T")


class ConfigError(ValueError):
    """Raised when the configuration file is missing or inconsistent."""


_STRING_KEYS = {
    "sprites": "sprite_file",
    "logo": "logo_file",
    "intro": "intro_file",
    "menu": "menu_file",
    "finish": "finish_file",
    "font": "font_file",
    "moduleintro": "module_intro_file",
    "moduleprelevel": "module_prelevel_file",
    "modulegameover": "module_gameover_file",
}

_INT_KEYS = {
    "reswidth": "res_width",
    "resheight": "res_height",
    "devmode": "dev_mode",
    "bitdepth": "bit_depth",
    "ingamewidth": "ingame_width",
    "ingameheight": "ingame_height",
    "videomode": "video_mode",
    "game": "game",
    "logoformat": "logo_format",
    "introformat": "intro_format",
    "menuformat": "menu_format",
    "finishformat": "finish_format",
    "moduleintroloop": "module_intro_loop",
    "moduleprelevelloop": "module_prelevel_loop",
    "modulegameoverloop": "module_gameover_loop",
}

_LEVEL_CODES = (
    "EFE8", "5165", "67D4", "2BDA", "11E5", "86EE", "4275", "A0B9",
    "501C", "E9ED", "D4E6", "A531", "CE96", "B1A4", "EBEA", "3B9C",
)

_TITUS_TITLES = (
    "           ON THE FOXY TRAIL",
    "           LOOKING FOR CLUES",
    "           ROAD WORKS AHEAD",
    "           GOING UNDERGROUND",
    "          FLAMING CATACOMBES",
    "            COMING TO TOWN",
    "               FOXYS DEN",
    "       ON THE ROAD TO MARRAKESH",
    "         HOME OF THE PHARAOHS",
    "           DESERT EXPERIENCE",
    "             WALLS OF SAND",
    "           A BEACON OF HOPE",
    "             A PIPE DREAM",
    "              GOING HOME",
    "             JUST MARRIED",
)

_MOKTAR_TITLES = (
    "     A LA RECHERCHE DE LA ZOUBIDA",
    "          LES QUARTIERS CHICS",
    "           ATTENTION TRAVAUX",
    "         LES COULOIRS DU METRO",
    "       LES CATACOMBES INFERNALES",
    "         ARRIVEE DANS LA CITE",
    "       L IMMEUBLE DE LA ZOUBIDA",
    "      SOUS LE CHEMIN DE MARRAKECH",
    "            LA CITE ENFOUIE",
    "             DESERT PRIVE",
    "          LA VILLE DES SABLES",
    "            LE PHARE OUEST",
    "             UN BON TUYAU",
    "           DE RETOUR AU PAYS",
    "           DIRECTION BARBES",
    "              BIG BISOUS",
)


class _Scanner:
    """Reads whitespace separated words and integers the way ``sscanf`` does."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos] in _C_WHITESPACE:
            self._pos += 1

    def word(self, width: Optional[int] = None) -> Optional[str]:
        self._skip_whitespace()
        start = self._pos
        end = len(self._text) if width is None else min(len(self._text), start + width)
        while self._pos < end and self._text[self._pos] not in _C_WHITESPACE:
            self._pos += 1
        return self._text[start:self._pos] or None

    def integer(self, width: Optional[int] = None) -> Optional[int]:
        self._skip_whitespace()
        start = self._pos
        end = len(self._text) if width is None else min(len(self._text), start + width)
        pos = start
        if pos < end and self._text[pos] in "+-":
            pos += 1
        digits_start = pos
        while pos < end and self._text[pos] in "0123456789":
            pos += 1
        if pos == digits_start:
            return None
        self._pos = pos
        return int(self._text[start:pos])


def _arguments(line: str) -> _Scanner:
    """Return a scanner positioned just after the command word."""
    scanner = _Scanner(line)
    scanner.word()
    return scanner


@dataclass
class Settings:
    """Everything the configuration file can set."""

    sprite_file: str = ""
    level_count: int = 0
    level_files: List[str] = field(default_factory=lambda: [""] * MAX_LEVELS)
    logo_file: str = ""
    logo_format: int = 0
    intro_file: str = ""
    intro_format: int = 0
    menu_file: str = ""
    menu_format: int = 0
    finish_file: str = ""
    finish_format: int = 0
    font_file: str = ""
    dev_mode: int = 0
    res_width: int = 0
    res_height: int = 0
    bit_depth: int = 0
    ingame_width: int = 0
    ingame_height: int = 0
    video_mode: int = 0
    game: int = 0
    module_intro_file: str = ""
    module_intro_loop: int = 0
    module_prelevel_file: str = ""
    module_prelevel_loop: int = 0
    module_level_files: List[str] = field(
        default_factory=lambda: [""] * MODULE_LEVEL_FILE_COUNT
    )
    module_level_loops: List[int] = field(
        default_factory=lambda: [0] * MODULE_LEVEL_FILE_COUNT
    )
    module_gameover_file: str = ""
    module_gameover_loop: int = 0
    module_levels: List[int] = field(default_factory=lambda: [0] * MAX_LEVELS)
    source: str = field(default="<string>", compare=False)

    @property
    def levels(self) -> List[str]:
        """The level files in play, first level first."""
        return self.level_files[:self.level_count]

    def _error(self, message: str) -> ConfigError:
        return ConfigError(f"{message}, check config file: {self.source}!")

    def check_files(self, base_dir: Union[str, os.PathLike, None] = None) -> None:
        """Make sure every level file and the sprite file exist.

        Relative names are taken relative to ``base_dir``, or to the
        current directory when it is not given.
        """
        base = Path(base_dir) if base_dir is not None else Path()
        for number, name in enumerate(self.levels, start=1):
            if not name:
                raise self._error(f"You have not specified level file number {number}")
            if not (base / name).is_file():
                raise self._error(
                    f"Level file number {number} ({name}) does not exist"
                )
        if not self.sprite_file or not (base / self.sprite_file).is_file():
            raise self._error("Sprite file does not exist")


def _indexed_entry(
    settings: Settings,
    line: str,
    read_value: Callable[[_Scanner], Optional[_T]],
    bad_index: str,
    missing_value: str,
) -> Tuple[int, _T]:
    """Parse ``<command> <index> <value>``; ``missing_value`` may use ``{index}``."""
    args = _arguments(line)
    index = args.integer(_INDEX_WIDTH)
    if index is None:
        raise settings._error(bad_index)
    value = read_value(args)
    if value is None:
        raise settings._error(missing_value.format(index=index))
    return index, value


def _read_word(args: _Scanner) -> Optional[str]:
    return args.word(_VALUE_WIDTH)


def _read_int(args: _Scanner) -> Optional[int]:
    return args.integer()


def parse_config(text: str, source: str = "<string>") -> Settings:
    """Parse configuration text and check that its level list is consistent."""
    settings = Settings(source=source)
    defined_levels = 0

    for line in text.splitlines():
        command = _Scanner(line).word(_COMMAND_WIDTH)
        if command is None or command.startswith("#"):
            continue

        if command in _STRING_KEYS:
            value = _arguments(line).word(_VALUE_WIDTH)
            if value is not None:
                setattr(settings, _STRING_KEYS[command], value)
        elif command in _INT_KEYS:
            number = _arguments(line).integer(_VALUE_WIDTH)
            if number is not None:
                setattr(settings, _INT_KEYS[command], number)
        elif command == "levelcount":
            if defined_levels > 0:
                raise settings._error("You may only specify one 'levelcount'")
            number = _arguments(line).integer(_VALUE_WIDTH)
            if number is not None:
                settings.level_count = number
            if not 1 <= settings.level_count <= MAX_LEVELS:
                raise settings._error(
                    f"'levelcount' ({settings.level_count}) must be between 1 and {MAX_LEVELS}"
                )
        elif command == "level":
            if settings.level_count == 0:
                raise settings._error("'levelcount' must be set before level files")
            index, name = _indexed_entry(
                settings, line, _read_word,
                "Invalid numbering on the individual levels",
                "You have not specified level file number {index}",
            )
            if not 1 <= index <= settings.level_count or defined_levels >= settings.level_count:
                raise settings._error("Invalid numbering on the individual levels")
            settings.level_files[index - 1] = name
            defined_levels += 1
        elif command == "modulelevelfile":
            index, name = _indexed_entry(
                settings, line, _read_word,
                "Invalid numbering on the module level files",
                "You have not specified module level file number {index}",
            )
            if not 1 <= index <= MODULE_LEVEL_FILE_COUNT:
                raise settings._error(
                    "Invalid numbering on the individual module level files"
                )
            settings.module_level_files[index - 1] = name
        elif command == "modulelevelfileloop":
            index, loop = _indexed_entry(
                settings, line, _read_int,
                "Invalid numbering on the module level files loop",
                "You have not specified module level file loop number {index}",
            )
            if not 1 <= index <= MODULE_LEVEL_FILE_COUNT:
                raise settings._error(
                    "Invalid numbering on the individual module levels loop"
                )
            settings.module_level_loops[index - 1] = loop
        elif command == "modulelevel":
            index, module = _indexed_entry(
                settings, line, _read_int,
                "Invalid numbering on the module levels",
                "You have not specified module level number {index}",
            )
            if not 1 <= index <= settings.level_count:
                raise settings._error("Invalid numbering on the individual module levels")
            settings.module_levels[index - 1] = module
        else:
            _log.warning("undefined command '%s' in %s", command, CONFIG_FILE)

    if defined_levels == 0:
        raise settings._error("You must specify at least one level")
    if defined_levels < settings.level_count:
        raise settings._error(
            f"'levelcount' ({settings.level_count}) and the number of specified "
            f"levels ({defined_levels}) does not match"
        )
    for number, name in enumerate(settings.levels, start=1):
        if not name:
            raise settings._error(f"You have not specified level file number {number}")
    return settings


def read_config(path: Union[str, os.PathLike], check_files: bool = True) -> Settings:
    """Read a configuration file; optionally verify the files it names exist."""
    source = os.fspath(path)
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigError(f"Can't open config file: {source}!") from exc
    settings = parse_config(text, source)
    if check_files:
        settings.check_files()
    return settings


def level_codes() -> List[str]:
    """The passwords of the sixteen levels, first level first."""
    return list(_LEVEL_CODES)


def level_titles(game: int) -> List[str]:
    """Level titles for a game (0: Titus, 1: Moktar); empty for any other value."""
    if game == 0:
        return list(_TITUS_TITLES)
    if game == 1:
        return list(_MOKTAR_TITLES)
    return []