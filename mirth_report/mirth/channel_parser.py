"""
Mirth Channel Export Parser

Parses channel XML exported from Mirth Connect into Channel records.

Expected structure:
  channel > {name, description, enabled,
             sourceConnector, destinationConnectors > connector*}
  connector > {name, properties > property*,
               transformer > {inboundProtocol, outboundProtocol}}
"""

import codecs
import logging
import xml.etree.ElementTree as ET
import xml.parsers.expat
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import ChannelParseError, ChannelReadError
from .descriptors import DescriptorRule, describe_connector
from .models import Channel, Connector, Property

logger = logging.getLogger(__name__)

# Display labels for transformer protocols; anything else is shown as-is
PROTOCOL_LABELS = {
    "HL7V2": "HL7 2.x",
}

# Boolean literals accepted for <enabled>
_TRUE_LITERALS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_LITERALS = {"0", "f", "F", "FALSE", "false", "False"}


def normalize_protocol(protocol: str, labels: Optional[Mapping[str, str]] = None) -> str:
    """Map a transformer protocol to its display label."""
    if labels is None:
        labels = PROTOCOL_LABELS
    return labels.get(protocol, protocol)


def parse_channel(source: bytes, path: Optional[Union[Path, str]] = None) -> Channel:
    """Parse a channel document held in memory."""
    try:
        root = ET.fromstring(source)
    except ET.ParseError as e:
        raise ChannelParseError(f"malformed XML: {e}", path) from e
    except (ValueError, LookupError) as e:
        # unsupported or unknown declared encoding
        raise ChannelParseError(f"cannot decode document: {e}", path) from e

    if root.tag != "channel":
        raise ChannelParseError(f"expected <channel> root, got <{root.tag}>", path)

    sources = root.findall("sourceConnector")
    if len(sources) != 1:
        raise ChannelParseError(
            f"expected exactly one <sourceConnector>, found {len(sources)}", path
        )

    raw_values = dict(zip(root.iter("property"), _raw_property_values(source, path)))

    return Channel(
        name=_text(root, "name"),
        description=_text(root, "description"),
        enabled=_parse_enabled(root, path),
        source=_parse_connector(sources[0], raw_values),
        destinations=[
            _parse_connector(elem, raw_values)
            for elem in root.findall("destinationConnectors/connector")
        ],
        path=Path(path) if path is not None else None,
    )


def _text(parent, tag: str) -> str:
    """Own character data of the first ``tag`` child, empty when absent.

    Text inside nested elements is skipped; text between them is kept.
    """
    elem = parent.find(tag)
    if elem is None:
        return ""
    return (elem.text or "") + "".join(child.tail or "" for child in elem)


def _document_encoding(source: bytes, declared: Optional[str]) -> str:
    if source.startswith(codecs.BOM_UTF16_LE):
        return "utf-16-le"
    if source.startswith(codecs.BOM_UTF16_BE):
        return "utf-16-be"
    return declared or "utf-8"


def _raw_property_values(source: bytes, path=None) -> List[str]:
    """Inner content of every <property> element exactly as written.

    Entity and character references, CDATA sections and nested markup are
    kept verbatim. Values are listed in document order, matching
    ``root.iter("property")``.
    """
    parser = xml.parsers.expat.ParserCreate()
    declared = []
    spans: List[List[int]] = []
    # indexes into spans of open <property> elements awaiting their content start
    pending: List[int] = []
    open_props: List[int] = []

    def mark_content_start():
        while pending:
            spans[pending.pop()][0] = parser.CurrentByteIndex

    def on_decl(version, encoding, standalone):
        if encoding:
            declared.append(encoding)

    def on_start(name, attrs):
        mark_content_start()
        if name == "property":
            spans.append([0, 0])
            pending.append(len(spans) - 1)
            open_props.append(len(spans) - 1)

    def on_end(name):
        mark_content_start()
        if name == "property":
            spans[open_props.pop()][1] = parser.CurrentByteIndex

    def on_other(*args):
        mark_content_start()

    parser.XmlDeclHandler = on_decl
    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    parser.CharacterDataHandler = on_other
    parser.CommentHandler = on_other
    parser.ProcessingInstructionHandler = on_other
    parser.StartCdataSectionHandler = on_other

    try:
        parser.Parse(source, True)
        encoding = _document_encoding(source, declared[0] if declared else None)
        # a self-closing element reports its end after the tag, giving an empty span
        return [
            source[start:end].decode(encoding) if end > start else ""
            for start, end in spans
        ]
    except xml.parsers.expat.ExpatError as e:
        raise ChannelParseError(f"malformed XML: {e}", path) from e
    except (ValueError, LookupError) as e:
        raise ChannelParseError(f"cannot decode document: {e}", path) from e


def _parse_enabled(root, path) -> bool:
    value = _text(root, "enabled").strip()
    if not value:
        return False
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    raise ChannelParseError(f"invalid <enabled> value: {value!r}", path)


def _parse_connector(elem, raw_values: Dict[Any, str]) -> Connector:
    """Map a sourceConnector or destination connector element."""
    return Connector(
        name=_text(elem, "name"),
        properties=[
            Property(name=prop.get("name", ""), value=raw_values.get(prop, ""))
            for prop in elem.findall("properties/property")
        ],
        protocol_in=_text(elem, "transformer/inboundProtocol"),
        protocol_out=_text(elem, "transformer/outboundProtocol"),
    )


class ChannelParser:
    """
    Parses one exported channel file into a Channel.
    """

    def __init__(self, channel_path: Union[Path, str]):
        self.path = Path(channel_path)
        try:
            self.source = self.path.read_bytes()
        except OSError as e:
            raise ChannelReadError(f"cannot read file: {e.strerror or e}", self.path) from e

    def parse(self) -> Channel:
        """Main entry point - parse the whole channel."""
        channel = parse_channel(self.source, self.path)
        logger.info(
            f"Parsed {self.path.name}: channel '{channel.name.strip()}', "
            f"{len(channel.destinations)} destinations"
        )
        return channel

    def get_summary(
        self,
        rules: Optional[Dict[str, DescriptorRule]] = None,
        labels: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """Summarize the channel and each of its connectors."""
        channel = self.parse()

        def connector_summary(role: str, connector: Connector, protocol: str) -> Dict[str, Any]:
            return {
                'role': role,
                'name': connector.name,
                'data_type': connector.data_type,
                'protocol': normalize_protocol(protocol, labels),
                'descriptor': describe_connector(connector.properties, self.path, rules),
                'properties': len(connector.properties),
            }

        connectors: List[Dict[str, Any]] = [
            connector_summary('source', channel.source, channel.source.protocol_in)
        ]
        for destination in channel.destinations:
            connectors.append(
                connector_summary('destination', destination, destination.protocol_out)
            )

        return {
            'name': channel.name.strip(),
            'description': channel.description.strip(),
            'enabled': channel.enabled,
            'path': str(self.path),
            'destinations': len(channel.destinations),
            'connectors': connectors,
        }
