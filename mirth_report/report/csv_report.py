"""
Channel Report Builder

Renders parsed channels as delimited rows, one per channel export:

    status, name, description, source protocol, source descriptor,
    destination protocols, destination descriptors

Fields are joined verbatim (no quoting). Commas and line breaks are removed
from descriptions, the only free-text field.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from ..config_loader import ReportConfig
from ..mirth.channel_parser import ChannelParser, normalize_protocol
from ..mirth.descriptors import build_rules, describe_connector
from ..mirth.models import Channel

logger = logging.getLogger(__name__)


def sanitize_description(text: str, newline_token: str = ". ", comma_replacement: str = ";") -> str:
    """Trim a description and make it safe for a single delimited field."""
    text = text.strip()
    for line_break in ("\r\n", "\n", "\r"):
        text = text.replace(line_break, newline_token)
    return text.replace(",", comma_replacement)


def find_channel_files(root: Union[Path, str], suffix: str = ".xml") -> Iterator[Path]:
    """Yield channel exports under ``root`` in lexical walk order.

    Entries of each directory are visited sorted by name, descending into
    subdirectories as they come. Symlinked directories are not followed.
    """
    root = Path(root)
    suffix = suffix.lower()

    if not root.is_dir():
        if root.name.lower().endswith(suffix):
            yield root
        return

    yield from _walk(root, suffix)


def _walk(directory: Path, suffix: str) -> Iterator[Path]:
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            yield from _walk(entry, suffix)
        elif entry.name.lower().endswith(suffix):
            yield entry


class ReportBuilder:
    """
    Builds the channel report from exported channel files.
    """

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()
        self.rules = build_rules(render_email_subject=self.config.render_email_subject)

    def header(self) -> str:
        return self.config.delimiter.join(self.config.header) + self.config.line_separator

    def render_channel(self, channel: Channel) -> str:
        """Render one channel as a terminated row."""
        cfg = self.config
        labels = cfg.protocol_labels

        destination_protocols: List[str] = []
        destination_descriptors: List[str] = []
        for destination in channel.destinations:
            destination_descriptors.append(
                describe_connector(destination.properties, channel.path, self.rules)
            )
            destination_protocols.append(normalize_protocol(destination.protocol_out, labels))

        fields = [
            "" if channel.enabled else cfg.disabled_marker,
            channel.name.strip(),
            sanitize_description(channel.description, cfg.newline_token, cfg.comma_replacement),
            normalize_protocol(channel.source.protocol_in, labels),
            describe_connector(channel.source.properties, channel.path, self.rules),
            cfg.multiple_values.join(destination_protocols),
            cfg.multiple_values.join(destination_descriptors),
        ]
        return cfg.delimiter.join(fields) + cfg.line_separator

    def build_report(self, paths: Iterable[Union[Path, str]]) -> str:
        """Parse and render every file, returning the complete report.

        Nothing is returned unless every file succeeds; the first read, parse
        or descriptor error propagates to the caller.
        """
        rows = [self.header()]
        for path in paths:
            channel = ChannelParser(path).parse()
            rows.append(self.render_channel(channel))

        logger.info(f"Rendered {len(rows) - 1} channels")
        return "".join(rows)

    def build_directory_report(self, xml_dir: Union[Path, str]) -> str:
        """Report on every channel export found under ``xml_dir``."""
        return self.build_report(find_channel_files(xml_dir, self.config.file_suffix))
