# src/cri/sizing/section_reader.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml  # ensure PyYAML is in requirements

from .hooks import SectionRegistrar
from .. import config


class SectionReader:
    """
    Reads section definitions from YAML/JSON files.

    Accepted file shapes:
      - a single definition:        {id: ..., sizes: [...]}
      - a list of definitions:      [{id: ...}, {id: ...}]
      - a wrapped list:             {sections: [{id: ...}, ...]}

    The reader only parses; literals are validated when they are registered.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger

    # ---------- public API ----------

    def read_path(self, path: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Read a single file OR a directory.

        - If it's a file: parse YAML/JSON and return its section literals.
        - If it's a directory: read all *.yml/*.yaml/*.json in it (non-recursive).
        """
        p = Path(path)
        if p.is_dir():
            return self._read_directory(p)
        if p.is_file():
            return self._read_file(p)
        raise FileNotFoundError(f"Sections path not found: {p}")

    # ---------- internal helpers ----------

    def _read_directory(self, dir_path: Path) -> List[Dict[str, Any]]:
        sections: List[Dict[str, Any]] = []

        for pattern in config.SECTION_FILE_PATTERNS:
            for file in sorted(dir_path.glob(pattern)):
                if self.logger:
                    self.logger.info("Reading sections file: %s", file)
                sections.extend(self._read_file(file))

        if self.logger:
            self.logger.info(
                "Loaded %d section definition(s) from directory %s",
                len(sections),
                dir_path,
            )
        return sections

    def _read_file(self, file_path: Path) -> List[Dict[str, Any]]:
        data = self._load_raw(file_path)

        if data is None:
            sections: List[Any] = []
        elif isinstance(data, dict) and "sections" in data:
            sections = list(data["sections"] or [])
        elif isinstance(data, list):
            sections = data
        else:
            sections = [data]

        if self.logger:
            self.logger.info(
                "Read %d section definition(s) from %s",
                len(sections),
                file_path,
            )
        return sections

    def _load_raw(self, file_path: Path) -> Any:
        suffix = file_path.suffix.lower()
        with file_path.open("r", encoding="utf-8") as f:
            if suffix in (".yml", ".yaml"):
                return yaml.safe_load(f)
            elif suffix == ".json":
                return json.load(f)
            else:
                raise ValueError(f"Unsupported sections file extension: {suffix}")


class SectionFileSource:
    """
    SectionSource backed by a file or directory of section definitions.
    """

    def __init__(self, path: Union[str, Path], reader: Optional[SectionReader] = None) -> None:
        self.path = Path(path)
        self.reader = reader or SectionReader()

    def register_sections(self, registrar: SectionRegistrar) -> None:
        for raw in self.reader.read_path(self.path):
            registrar.register_section(raw)
