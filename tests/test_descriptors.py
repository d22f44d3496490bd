"""
Tests for connector descriptor rules and DataType dispatch.
"""

import pytest

from mirth_report.errors import MissingDataTypeError, UnknownDataTypeError
from mirth_report.mirth.descriptors import (
    DESCRIPTOR_RULES,
    build_rules,
    describe_connector,
    registered_data_types,
)
from tests import props


@pytest.mark.parametrize("pairs, expected", [
    ([("DataType", "File Reader"), ("host", "x")], "FILE: x"),
    ([("DataType", "File Writer"), ("host", "ftp.example.org")], "FTP: ftp.example.org"),
    ([("DataType", "Channel Reader")], "Channel Reader"),
    ([("DataType", "Channel Writer"), ("host", "ignored")], "Channel Writer"),
    ([("DataType", "Database Writer"), ("URL", "jdbc:mysql://db/app")], "jdbc:mysql://db/app"),
    ([("DataType", "JavaScript Reader"), ("host", "poller")], "JS: poller"),
    ([("DataType", "JavaScript Writer"), ("host", "sink")], "JS: sink"),
    ([("DataType", "LLP Listener"), ("host", "h"), ("port", "1"), ("template", "t")], "LLP: h:1/t"),
    ([("DataType", "LLP Sender"), ("template", "t"), ("port", "2"), ("host", "h")], "LLP: h:2/t"),
    ([("DataType", "SMTP Sender"), ("smtpHost", "mail"), ("smtpPort", "25")], "SMTP: mail:25"),
    ([("DataType", "HTTP Sender"), ("host", "https://api/x")], "https://api/x"),
    ([("DataType", "HTTP Listener"), ("port", "8080"), ("host", "0.0.0.0")], "HTTP://0.0.0.0:8080"),
    ([("DataType", "Web Service Sender"), ("dispatcherWsdlUrl", "http://s?wsdl")], "SOAP: http://s?wsdl"),
    (
        [("DataType", "Document Writer"), ("host", "/out"), ("outputPattern", "a.pdf"), ("documentType", "pdf")],
        "PDF: /out/a.pdf",
    ),
])
def test_descriptor_templates(pairs, expected):
    assert describe_connector(props(*pairs)) == expected


class TestMissingFields:
    """Fields that are not present render as empty strings."""

    def test_file_reader_without_host(self):
        assert describe_connector(props(("DataType", "File Reader"))) == "FILE: "

    def test_llp_partial(self):
        assert describe_connector(props(("DataType", "LLP Listener"), ("port", "6661"))) == "LLP: :6661/"

    def test_database_writer_falls_back(self):
        assert describe_connector(props(("DataType", "Database Writer"))) == "DB:"

    def test_database_writer_skips_empty_url(self):
        pairs = props(("DataType", "Database Writer"), ("URL", ""), ("URL", "jdbc:pg://b"))
        assert describe_connector(pairs) == "jdbc:pg://b"

    def test_http_sender_without_host(self):
        assert describe_connector(props(("DataType", "HTTP Sender"))) == "HTTP:"

    def test_http_sender_empty_host_is_verbatim(self):
        assert describe_connector(props(("DataType", "HTTP Sender"), ("host", ""))) == ""

    def test_document_writer_without_type(self):
        pairs = props(("DataType", "Document Writer"), ("host", "/out"), ("outputPattern", "x"))
        assert describe_connector(pairs) == ": /out/x"


class TestScanOrder:
    """Duplicate keys follow document-order scan semantics."""

    def test_single_field_takes_first(self):
        pairs = props(("DataType", "File Reader"), ("host", "first"), ("host", "second"))
        assert describe_connector(pairs) == "FILE: first"

    def test_single_field_takes_first_even_if_empty(self):
        pairs = props(("DataType", "File Writer"), ("host", ""), ("host", "second"))
        assert describe_connector(pairs) == "FTP: "

    def test_multi_field_stops_once_complete(self):
        pairs = props(
            ("DataType", "HTTP Listener"),
            ("host", "a"), ("port", "1"), ("host", "b"),
        )
        assert describe_connector(pairs) == "HTTP://a:1"

    def test_multi_field_overwrites_until_complete(self):
        pairs = props(
            ("DataType", "HTTP Listener"),
            ("host", "a"), ("host", "b"), ("port", "1"),
        )
        assert describe_connector(pairs) == "HTTP://b:1"

    def test_first_data_type_wins(self):
        pairs = props(("DataType", "File Reader"), ("host", "h"), ("DataType", "Bogus"))
        assert describe_connector(pairs) == "FILE: h"


class TestEmailSender:
    """The legacy rendering puts the subject into the port slot."""

    PAIRS = [
        ("DataType", "Email Sender"),
        ("fromAddress", "lab@example.org"),
        ("hostname", "smtp.example.org"),
        ("smtpPort", "25"),
        ("subject", "Lab Results"),
    ]

    def test_legacy_stops_after_host_and_port(self):
        assert describe_connector(props(*self.PAIRS)) == "SMTP: smtp.example.org:25/lab@example.org>"

    def test_legacy_subject_overwrites_port(self):
        pairs = props(
            ("DataType", "Email Sender"),
            ("hostname", "mail"),
            ("smtpPort", ""),
            ("subject", "Results"),
        )
        assert describe_connector(pairs) == "SMTP: mail:Results/>"

    def test_legacy_misses_later_from_address(self):
        pairs = props(
            ("DataType", "Email Sender"),
            ("hostname", "mail"),
            ("smtpPort", "25"),
            ("fromAddress", "late@example.org"),
        )
        assert describe_connector(pairs) == "SMTP: mail:25/>"

    def test_rendered_subject(self):
        rules = build_rules(render_email_subject=True)
        assert (
            describe_connector(props(*self.PAIRS), rules=rules)
            == "SMTP: smtp.example.org:25/lab@example.org>Lab Results"
        )


class TestDispatch:

    def test_unknown_data_type(self):
        with pytest.raises(UnknownDataTypeError) as exc_info:
            describe_connector(props(("DataType", "FHIR Listener")), path="ch.xml")
        assert exc_info.value.data_type == "FHIR Listener"
        assert str(exc_info.value) == "ch.xml: FHIR Listener not defined"

    def test_data_type_is_case_sensitive(self):
        with pytest.raises(UnknownDataTypeError):
            describe_connector(props(("DataType", "file reader")))

    def test_missing_data_type(self):
        with pytest.raises(MissingDataTypeError):
            describe_connector(props(("host", "x")))

    def test_empty_properties(self):
        with pytest.raises(MissingDataTypeError):
            describe_connector([])

    def test_custom_rule_table(self):
        rules = {"Custom": lambda properties: "custom"}
        assert describe_connector(props(("DataType", "Custom")), rules=rules) == "custom"
        with pytest.raises(UnknownDataTypeError):
            describe_connector(props(("DataType", "File Reader")), rules=rules)

    def test_registered_data_types(self):
        data_types = registered_data_types()
        assert data_types == sorted(data_types)
        assert len(data_types) == 15
        assert "Email Sender" in data_types

    def test_build_rules_does_not_mutate_registry(self):
        legacy = DESCRIPTOR_RULES["Email Sender"]
        rules = build_rules(render_email_subject=True)
        assert rules["Email Sender"] is not legacy
        assert DESCRIPTOR_RULES["Email Sender"] is legacy
