""" Module for user configuration options stored in the .cfg file format, and for lenient value parsing. """

import ast
from configparser import ConfigParser, Error as ConfigError
import re
from typing import Any, Dict, Optional

ConfigDict = Dict[str, Any]
NestedConfigDict = Dict[str, ConfigDict]

# Signed 64-bit limits. Anything outside them is treated as garbage rather than a usable number.
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int(s:Optional[str]) -> Optional[int]:
    """ Attempt to parse a string as a 64-bit integer and return None if it fails for any reason.
        Only an optional sign followed by ASCII digits is accepted; int() alone is far too forgiving. """
    try:
        if s is None or not _INT_PATTERN.fullmatch(s):
            return None
        value = int(s)
    except Exception:
        return None
    if not INT_MIN <= value <= INT_MAX:
        return None
    return value


def first_present(*values:Any, default:Any=None) -> Any:
    """ Return the first of <values> that is not None, or <default> if they all are. """
    for v in values:
        if v is not None:
            return v
    return default


def eval_str(s:str) -> Any:
    """ Try to evaluate a string as a Python object using ast.literal_eval. This fixes crap like bool('False') = True.
        Strings that are read as names will throw an error, in which case they should be left as-is. """
    try:
        return ast.literal_eval(s)
    except (SyntaxError, ValueError):
        return s


class ConfigIO:
    """ Performs file I/O and data type conversion on the contents of CFG files. """

    def __init__(self, *, from_str=eval_str, encoding='utf-8') -> None:
        self._from_str = from_str  # Converts input strings to other values (default uses ast.literal_eval).
        self._encoding = encoding  # Character encoding of CFG files.

    def read(self, filename:str) -> NestedConfigDict:
        """ Read config settings from a file in .cfg format into a nested mapping. """
        parser = ConfigParser()
        with open(filename, 'r', encoding=self._encoding) as fp:
            parser.read_file(fp)
        options = {}
        for sect in parser:
            page = options[sect] = {}
            for name, s in parser[sect].items():
                page[name] = self._from_str(s)
        return options


class SimpleConfigDict(ConfigDict):
    """ Configuration dict corresponding to one section of a CFG file. Missing files leave it empty. """

    def __init__(self, filename:str, sect="devrepl", *, io:ConfigIO=None) -> None:
        super().__init__()
        self._filename = filename    # Full name of a (possibly nonexistent) file in CFG format.
        self._sect = sect            # Name of our CFG file section.
        self._io = io or ConfigIO()  # Performs whole reads of CFG files.

    def read(self) -> bool:
        """ Try to read config options from the CFG file. Return True if successful.
            A file that can't be read or parsed leaves the defaults in place. """
        try:
            cfg = self._io.read(self._filename)
        except (OSError, UnicodeDecodeError, ConfigError):
            return False
        options = cfg.get(self._sect)
        if options:
            self.update(options)
        return True
