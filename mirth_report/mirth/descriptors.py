"""
Connector Descriptors

Mirth stores every connector kind in the same generic structure:

    <properties>
      <property name="DataType">LLP Listener</property>
      <property name="host">0.0.0.0</property>
      ...
    </properties>

The value of the DataType property decides which keys are relevant and how
they are rendered. Each kind registers a rule below; describe_connector looks
the rule up and applies it.

Lookups scan the property list in document order. Rules reading a single key
take its first occurrence. Rules reading several keys let later duplicates
overwrite earlier ones and stop as soon as every key has a non-empty value.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from ..errors import MissingDataTypeError, UnknownDataTypeError
from .models import Property

logger = logging.getLogger(__name__)

DescriptorRule = Callable[[Sequence[Property]], str]

DATA_TYPE_PROPERTY = "DataType"

# DataType value -> rule
DESCRIPTOR_RULES: Dict[str, DescriptorRule] = {}


def descriptor(*data_types: str) -> Callable[[DescriptorRule], DescriptorRule]:
    """Register a rule for one or more DataType values."""
    def register(rule: DescriptorRule) -> DescriptorRule:
        for data_type in data_types:
            DESCRIPTOR_RULES[data_type] = rule
        return rule
    return register


def registered_data_types() -> List[str]:
    return sorted(DESCRIPTOR_RULES)


def describe_connector(
    properties: Sequence[Property],
    path: Optional[Union[Path, str]] = None,
    rules: Optional[Dict[str, DescriptorRule]] = None,
) -> str:
    """Render the endpoint descriptor for a connector's properties.

    Args:
        properties: The connector's properties in document order
        path: Source file, only used in error messages
        rules: Rule table to dispatch on (defaults to DESCRIPTOR_RULES)

    Raises:
        MissingDataTypeError: no DataType property is present
        UnknownDataTypeError: the first DataType value has no rule
    """
    if rules is None:
        rules = DESCRIPTOR_RULES

    for prop in properties:
        if prop.name != DATA_TYPE_PROPERTY:
            continue
        rule = rules.get(prop.value)
        if rule is None:
            raise UnknownDataTypeError(prop.value, path)
        logger.debug(f"Describing {prop.value} connector via {rule.__name__}")
        return rule(properties)

    raise MissingDataTypeError("connector has no DataType property", path)


def build_rules(render_email_subject: bool = False) -> Dict[str, DescriptorRule]:
    """Copy of the registered rules, with configurable variants applied."""
    rules = dict(DESCRIPTOR_RULES)
    if render_email_subject:
        rules["Email Sender"] = _email_sender_with_subject
    return rules


# ─── Lookup helpers ──────────────────────────────────────────────────────────

def _first(properties: Sequence[Property], name: str) -> Optional[str]:
    """Value of the first property called ``name``, or None."""
    for prop in properties:
        if prop.name == name:
            return prop.value
    return None


def _collect(properties: Sequence[Property], *names: str) -> Dict[str, str]:
    """Scan for several keys, stopping once all of them are non-empty."""
    values = dict.fromkeys(names, "")
    for prop in properties:
        if prop.name in values:
            values[prop.name] = prop.value
        if all(values.values()):
            break
    return values


# ─── Rules ───────────────────────────────────────────────────────────────────

@descriptor("File Reader")
def _file_reader(properties: Sequence[Property]) -> str:
    return f"FILE: {_first(properties, 'host') or ''}"


@descriptor("File Writer")
def _file_writer(properties: Sequence[Property]) -> str:
    return f"FTP: {_first(properties, 'host') or ''}"


@descriptor("Channel Reader", "Channel Writer")
def _channel(properties: Sequence[Property]) -> str:
    # Channel-to-channel connectors have no address, the kind is the summary
    return _first(properties, DATA_TYPE_PROPERTY) or ""


@descriptor("Database Writer")
def _database_writer(properties: Sequence[Property]) -> str:
    for prop in properties:
        if prop.name == "URL" and prop.value:
            return prop.value
    return "DB:"


@descriptor("JavaScript Reader", "JavaScript Writer")
def _javascript(properties: Sequence[Property]) -> str:
    return f"JS: {_first(properties, 'host') or ''}"


@descriptor("LLP Listener", "LLP Sender")
def _llp(properties: Sequence[Property]) -> str:
    fields = _collect(properties, "host", "port", "template")
    return f"LLP: {fields['host']}:{fields['port']}/{fields['template']}"


@descriptor("SMTP Sender")
def _smtp_sender(properties: Sequence[Property]) -> str:
    fields = _collect(properties, "smtpHost", "smtpPort")
    return f"SMTP: {fields['smtpHost']}:{fields['smtpPort']}"


@descriptor("HTTP Sender")
def _http_sender(properties: Sequence[Property]) -> str:
    host = _first(properties, "host")
    return "HTTP:" if host is None else host


@descriptor("HTTP Listener")
def _http_listener(properties: Sequence[Property]) -> str:
    fields = _collect(properties, "host", "port")
    return f"HTTP://{fields['host']}:{fields['port']}"


@descriptor("Email Sender")
def _email_sender(properties: Sequence[Property]) -> str:
    """Legacy rendering: ``subject`` lands in the port slot.

    The subject column is therefore always empty, the port shows whichever of
    smtpPort/subject was seen last, and the scan ends once host and port are
    both set.
    """
    host = port = sender = ""
    for prop in properties:
        if prop.name == "hostname":
            host = prop.value
        elif prop.name in ("smtpPort", "subject"):
            port = prop.value
        elif prop.name == "fromAddress":
            sender = prop.value
        if host and port:
            break
    return f"SMTP: {host}:{port}/{sender}>"


def _email_sender_with_subject(properties: Sequence[Property]) -> str:
    fields = _collect(properties, "hostname", "smtpPort", "fromAddress", "subject")
    return (
        f"SMTP: {fields['hostname']}:{fields['smtpPort']}"
        f"/{fields['fromAddress']}>{fields['subject']}"
    )


@descriptor("Web Service Sender")
def _web_service_sender(properties: Sequence[Property]) -> str:
    return f"SOAP: {_first(properties, 'dispatcherWsdlUrl') or ''}"


@descriptor("Document Writer")
def _document_writer(properties: Sequence[Property]) -> str:
    fields = _collect(properties, "host", "outputPattern", "documentType")
    return f"{fields['documentType'].upper()}: {fields['host']}/{fields['outputPattern']}"
