"""
Report Configuration Loader

Loads report layout, protocol labels and connector options from YAML.
Missing sections fall back to the built-in defaults.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_HEADER = [
    "Status",
    "Name",
    "Description",
    "Source Data Type",
    "Source Protocol : Address",
    "Destination Data Type",
    "Destination Protocol : Address",
]


@dataclass
class ReportConfig:
    """Complete report configuration."""
    version: str = "1.0"
    config_name: str = "default"

    # Layout
    header: List[str] = field(default_factory=lambda: list(DEFAULT_HEADER))
    delimiter: str = ","
    line_separator: str = "\r\n"
    multiple_values: str = "; "
    disabled_marker: str = "Disabled"
    file_suffix: str = ".xml"

    # Description sanitizing
    newline_token: str = ". "
    comma_replacement: str = ";"

    # Protocol display labels
    protocol_labels: Dict[str, str] = field(default_factory=lambda: {"HL7V2": "HL7 2.x"})

    # Connector options
    render_email_subject: bool = False


def _section(raw: Dict[str, Any], key: str, prefix: str = "") -> Dict[str, Any]:
    section = raw.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{prefix}{key} must be a mapping")
    return section


class ConfigLoader:
    """
    Loads and manages report configuration.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize with optional custom config directory."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"
        self.config_dir = Path(config_dir)

    def load_config(self, config_file: str = "report_config.yaml") -> ReportConfig:
        """Load the main configuration file."""
        config_path = self.config_dir / config_file

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}

        return self.from_dict(raw_config)

    @staticmethod
    def from_dict(raw_config: Dict[str, Any]) -> ReportConfig:
        """Build a ReportConfig from parsed YAML."""
        if not isinstance(raw_config, dict):
            raise ValueError("configuration root must be a mapping")

        defaults = ReportConfig()

        report = _section(raw_config, "report")
        description = _section(raw_config, "description")
        protocols = _section(raw_config, "protocols")
        email_sender = _section(_section(raw_config, "connectors"), "email_sender", "connectors.")

        header = report.get("header", defaults.header)
        if not isinstance(header, list) or not header:
            raise ValueError("report.header must be a non-empty list of column names")

        labels = protocols.get("labels", defaults.protocol_labels)
        if not isinstance(labels, dict):
            raise ValueError("protocols.labels must be a mapping")

        render_subject = email_sender.get("render_subject", defaults.render_email_subject)
        if not isinstance(render_subject, bool):
            raise ValueError("connectors.email_sender.render_subject must be true or false")

        config = ReportConfig(
            version=str(raw_config.get("version", defaults.version)),
            config_name=raw_config.get("config_name", defaults.config_name),

            # Layout
            header=[str(column) for column in header],
            delimiter=report.get("delimiter", defaults.delimiter),
            line_separator=report.get("line_separator", defaults.line_separator),
            multiple_values=report.get("multiple_values", defaults.multiple_values),
            disabled_marker=report.get("disabled_marker", defaults.disabled_marker),
            file_suffix=report.get("file_suffix", defaults.file_suffix),

            # Description
            newline_token=description.get("newline_token", defaults.newline_token),
            comma_replacement=description.get("comma_replacement", defaults.comma_replacement),

            # Protocols
            protocol_labels={str(k): str(v) for k, v in labels.items()},

            # Connectors
            render_email_subject=render_subject,
        )

        logger.debug(f"Loaded report config '{config.config_name}' v{config.version}")
        return config
