"""
Mirth channel export records.

Parsed once per file by ChannelParser and never modified afterwards.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class Property:
    """A <property name="...">value</property> entry of a connector."""
    name: str
    value: str = ""


@dataclass(frozen=True)
class Connector:
    """A source or destination connector with its property bag."""
    name: str
    properties: List[Property] = field(default_factory=list)
    protocol_in: str = ""     # transformer/inboundProtocol, used for the source
    protocol_out: str = ""    # transformer/outboundProtocol, used for destinations

    def get(self, name: str, default: str = "") -> str:
        """Value of the first property called ``name``."""
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return default

    @property
    def data_type(self) -> Optional[str]:
        for prop in self.properties:
            if prop.name == "DataType":
                return prop.value
        return None


@dataclass(frozen=True)
class Channel:
    """One exported channel: a source connector feeding 0..N destinations."""
    name: str
    description: str
    enabled: bool
    source: Connector
    destinations: List[Connector] = field(default_factory=list)
    path: Optional[Path] = None
