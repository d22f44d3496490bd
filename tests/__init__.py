"""Test suite for Mirth Channel Report."""

from xml.sax.saxutils import escape, quoteattr

from mirth_report.mirth.models import Property


def props(*pairs):
    """Helper: build a property list from (name, value) pairs."""
    return [Property(name=name, value=value) for name, value in pairs]


def connector_xml(properties, inbound="HL7V2", outbound="HL7V2", name="connector", tag="connector"):
    """Helper: render a connector element from (name, value) pairs."""
    rendered = "".join(
        f"<property name={quoteattr(key)}>{escape(value)}</property>"
        for key, value in properties
    )
    return (
        f"<{tag}><name>{escape(name)}</name>"
        f"<properties>{rendered}</properties>"
        f"<transformer><inboundProtocol>{inbound}</inboundProtocol>"
        f"<outboundProtocol>{outbound}</outboundProtocol></transformer>"
        f"</{tag}>"
    )


# Keeps carriage returns intact through the XML parser
CR_ENTITY = {"\r": "&#13;"}


def channel_xml(name="Channel", description="", enabled="true", source=None, destinations=()):
    """Helper: render a complete channel export document."""
    if source is None:
        source = [("DataType", "Channel Reader")]
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<channel><name>{escape(name)}</name>"
        f"<description>{escape(description, CR_ENTITY)}</description>"
        f"<enabled>{enabled}</enabled>"
        f"{connector_xml(source, name='sourceConnector', tag='sourceConnector')}"
        f"<destinationConnectors>{''.join(destinations)}</destinationConnectors>"
        f"</channel>"
    )
