"""Mirth Connect channel export parsing."""

from .channel_parser import ChannelParser, parse_channel, normalize_protocol
from .descriptors import describe_connector, registered_data_types
from .models import Channel, Connector, Property

__all__ = [
    "ChannelParser",
    "parse_channel",
    "normalize_protocol",
    "describe_connector",
    "registered_data_types",
    "Channel",
    "Connector",
    "Property",
]
