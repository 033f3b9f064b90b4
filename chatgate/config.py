"""Loading of ``config.ini`` files into section/key lookups."""

from __future__ import annotations

import configparser
import logging
from collections.abc import Iterator, Mapping
from os import PathLike
from pathlib import Path
from types import MappingProxyType

__all__ = ["SectionInfo", "ConfigMgr", "load_config"]

_log = logging.getLogger(__name__)


class SectionInfo:
    """Key/value pairs of one configuration section; missing keys read as ``""``."""

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        self._data = MappingProxyType(dict(data or {}))

    def __getitem__(self, key: str) -> str:
        return self._data.get(key, "")

    def get_value(self, key: str) -> str:
        """Return the value for ``key``, or an empty string if it is absent."""
        return self[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def items(self) -> list[tuple[str, str]]:
        return sorted(self._data.items())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SectionInfo):
            return dict(self._data) == dict(other._data)
        return NotImplemented

    def __repr__(self) -> str:
        return f"SectionInfo({dict(self._data)!r})"


class ConfigMgr:
    """All sections of a configuration; missing sections read as empty."""

    def __init__(self, sections: Mapping[str, Mapping[str, str]]) -> None:
        self._sections = {
            name: SectionInfo(values) for name, values in sections.items()
        }

    def __getitem__(self, section: str) -> SectionInfo:
        return self._sections.get(section, SectionInfo())

    def get_value(self, section: str, key: str) -> str:
        """Return ``key`` from ``section``, or ``""`` when either is missing."""
        return self[section][key]

    def section_names(self) -> list[str]:
        """Return the section names in sorted order."""
        return sorted(self._sections)

    def __contains__(self, section: object) -> bool:
        return section in self._sections

    def __repr__(self) -> str:
        return f"ConfigMgr(sections={self.section_names()!r})"


def load_config(path: str | PathLike[str] | None = None) -> ConfigMgr:
    """Read an INI file (``config.ini`` in the working directory by default)."""
    config_path = Path.cwd() / "config.ini" if path is None else Path(path)
    _log.info("Config path: %s", config_path)

    # A section literally named DEFAULT is kept as an ordinary section.
    parser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=",),
        default_section="\x00",
    )
    parser.optionxform = str  # keys are case-sensitive
    with open(config_path, encoding="utf-8") as handle:
        parser.read_file(handle)

    sections = {name: dict(parser.items(name)) for name in parser.sections()}
    config = ConfigMgr(sections)
    for name in config.section_names():
        _log.debug("[%s]", name)
        for key, value in config[name].items():
            _log.debug("%s=%s", key, value)
    return config