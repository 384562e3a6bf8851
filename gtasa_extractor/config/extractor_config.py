#!/usr/bin/env python3
"""
Extractor Configuration

Parser for the extractor INI file.

INI Format:
    [extractor]
    paths_dir = ./paths
    pattern = nodes*.dat
    output_dir = ./export
    batch_size = 1000
    legacy_bitfields = false
    log_file = extract.log
"""

import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..constants import DEFAULT_BATCH_SIZE, DEFAULT_NODE_FILE_PATTERN

SECTION = "extractor"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('true', '1', 'yes', 'on')


@dataclass
class ExtractorConfig:
    """Settings for one extraction run"""
    paths_dir: str = "./paths"  # Directory holding nodes*.dat files
    pattern: str = DEFAULT_NODE_FILE_PATTERN
    output_dir: str = "./export"  # Batched JSON output
    batch_size: int = DEFAULT_BATCH_SIZE
    legacy_bitfields: bool = False  # Reproduce historical sub-byte field values
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration"""
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

        if not self.paths_dir:
            raise ValueError("paths_dir is empty")

        if not self.pattern:
            raise ValueError("pattern is empty")

    @classmethod
    def from_ini(cls, config_path: Union[str, Path]) -> 'ExtractorConfig':
        """
        Load configuration from an INI file.

        Missing keys (or a missing [extractor] section) keep their defaults.

        Args:
            config_path: Path to the INI file

        Returns:
            ExtractorConfig instance
        """
        if not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        config = configparser.ConfigParser()
        config.read(config_path)

        if not config.has_section(SECTION):
            return cls()

        data = config[SECTION]
        defaults = cls()

        batch_size_str = data.get('batch_size')
        try:
            batch_size = int(batch_size_str) if batch_size_str else defaults.batch_size
        except ValueError:
            raise ValueError(f"Invalid batch_size '{batch_size_str}' in {config_path}")

        log_file = data.get('log_file', None)
        if log_file:
            log_file = log_file.strip()

        return cls(
            paths_dir=data.get('paths_dir', defaults.paths_dir).strip(),
            pattern=data.get('pattern', defaults.pattern).strip(),
            output_dir=data.get('output_dir', defaults.output_dir).strip(),
            batch_size=batch_size,
            legacy_bitfields=_parse_bool(data.get('legacy_bitfields', 'false')),
            log_file=log_file or None,
        )
