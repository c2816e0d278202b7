"""Tests for SOAP response parsing and UPnP error translation (pyigd/parsing.py)."""

from __future__ import annotations

import ipaddress

import pytest

from conftest import ENVELOPE, soap_fault, soap_response
from pyigd import parsing
from pyigd.exceptions import (
    AddAnyPortError,
    AddPortError,
    ErrorCodeError,
    GetExternalIPError,
    GetGenericPortMappingEntryError,
    HTTPError,
    InvalidResponseError,
    Reason,
    RemovePortError,
)
from pyigd.models import PortMappingEntry, PortMappingProtocol

pytestmark = [pytest.mark.unit]


class TestParseResponse:
    def test_success_element_is_returned(self):
        text = soap_response("GetExternalIPAddress", NewExternalIPAddress="1.2.3.4")
        response = parsing.parse_response(text, "GetExternalIPAddressResponse")

        assert response.xml.name == "GetExternalIPAddressResponse"
        assert response.field("NewExternalIPAddress") == "1.2.3.4"
        assert response.text == text

    def test_success_subtree_is_unchanged(self):
        text = ENVELOPE.format("<FooResponse><A>1</A><B><C>x</C></B></FooResponse>")
        response = parsing.parse_response(text, "FooResponse")

        assert [child.name for child in response.xml.find_all(True, recursive=False)] == ["A", "B"]
        assert response.xml.find("C").get_text() == "x"

    def test_fault_is_reported_as_error_code(self):
        text = soap_fault(606, "Action not authorized")
        with pytest.raises(ErrorCodeError) as excinfo:
            parsing.parse_response(text, "AddPortMappingResponse")

        assert excinfo.value.code == 606
        assert excinfo.value.description == "Action not authorized"

    def test_unrecognized_code_is_still_surfaced(self):
        with pytest.raises(ErrorCodeError) as excinfo:
            parsing.parse_response(soap_fault(501, "Action Failed"), "AddPortMappingResponse")
        assert excinfo.value.code == 501

    @pytest.mark.parametrize(
        "text",
        [
            "this is not xml",
            "",
            "<html><body>Not Found</body></html>",
            ENVELOPE.format("<OtherResponse></OtherResponse>"),
            ENVELOPE.format("<s:Fault><faultcode>s:Client</faultcode></s:Fault>"),
            soap_fault("abc", "Bad code"),
            soap_fault(70000, "Too big"),
            soap_fault(-1, "Negative"),
            soap_fault(402, ""),
        ],
    )
    def test_invalid_responses_keep_the_text(self, text):
        with pytest.raises(InvalidResponseError) as excinfo:
            parsing.parse_response(text, "AddPortMappingResponse")
        assert excinfo.value.text == text


class TestParseFields:
    def test_external_ip(self):
        response = parsing.parse_response(
            soap_response("GetExternalIPAddress", NewExternalIPAddress="203.0.113.7"),
            "GetExternalIPAddressResponse",
        )
        assert parsing.parse_external_ip(response) == ipaddress.IPv4Address("203.0.113.7")

    @pytest.mark.parametrize("fields", [{}, {"NewExternalIPAddress": ""}, {"NewExternalIPAddress": "300.1.1.1"}])
    def test_external_ip_invalid(self, fields):
        text = soap_response("GetExternalIPAddress", **fields)
        response = parsing.parse_response(text, "GetExternalIPAddressResponse")

        with pytest.raises(GetExternalIPError) as excinfo:
            parsing.parse_external_ip(response)

        assert excinfo.value.reason is Reason.REQUEST_ERROR
        assert isinstance(excinfo.value.request_error, InvalidResponseError)
        assert excinfo.value.request_error.text == text

    def test_reserved_port(self):
        response = parsing.parse_response(
            soap_response("AddAnyPortMapping", NewReservedPort="51234"),
            "AddAnyPortMappingResponse",
        )
        assert parsing.parse_reserved_port(response) == 51234

    @pytest.mark.parametrize("value", ["", "65536", "port"])
    def test_reserved_port_invalid(self, value):
        response = parsing.parse_response(
            soap_response("AddAnyPortMapping", NewReservedPort=value),
            "AddAnyPortMappingResponse",
        )
        with pytest.raises(AddAnyPortError) as excinfo:
            parsing.parse_reserved_port(response)
        assert isinstance(excinfo.value.request_error, InvalidResponseError)


ENTRY_FIELDS = {
    "NewRemoteHost": "",
    "NewExternalPort": "43210",
    "NewProtocol": "UDP",
    "NewInternalPort": "4000",
    "NewInternalClient": "192.168.1.2",
    "NewEnabled": "1",
    "NewPortMappingDescription": "game server",
    "NewLeaseDuration": "3600",
}


def entry_response(**overrides):
    fields = dict(ENTRY_FIELDS)
    for name, value in overrides.items():
        if value is None:
            del fields[name]
        else:
            fields[name] = value
    return parsing.parse_response(
        soap_response("GetGenericPortMappingEntry", **fields),
        "GetGenericPortMappingEntryResponse",
    )


class TestParsePortMappingEntry:
    def test_entry(self):
        entry = parsing.parse_port_mapping_entry(entry_response())

        assert entry == PortMappingEntry(
            remote_host="",
            external_port=43210,
            protocol=PortMappingProtocol.UDP,
            internal_port=4000,
            internal_client="192.168.1.2",
            enabled=True,
            description="game server",
            lease_duration=3600,
        )

    def test_disabled_entry_with_empty_description(self):
        entry = parsing.parse_port_mapping_entry(
            entry_response(NewEnabled="0", NewPortMappingDescription="", NewProtocol="TCP")
        )
        assert entry.enabled is False
        assert entry.description == ""
        assert entry.protocol is PortMappingProtocol.TCP

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"NewRemoteHost": None}, "NewRemoteHost is missing"),
            ({"NewExternalPort": None}, "NewExternalPort is missing"),
            ({"NewExternalPort": "70000"}, "Field NewExternalPort is invalid"),
            ({"NewProtocol": "tcp"}, "Field NewProtocol is invalid"),
            ({"NewProtocol": "SCTP"}, "Field NewProtocol is invalid"),
            ({"NewInternalPort": "x"}, "Field NewInternalPort is invalid"),
            ({"NewInternalClient": ""}, "Field NewInternalClient is empty"),
            ({"NewEnabled": "2"}, "Field NewEnabled is invalid"),
            ({"NewEnabled": "true"}, "Field NewEnabled is invalid"),
            ({"NewPortMappingDescription": None}, "NewPortMappingDescription is missing"),
            ({"NewLeaseDuration": "4294967296"}, "Field NewLeaseDuration is invalid"),
        ],
    )
    def test_invalid_fields_are_named(self, overrides, message):
        with pytest.raises(GetGenericPortMappingEntryError) as excinfo:
            parsing.parse_port_mapping_entry(entry_response(**overrides))

        assert excinfo.value.reason is Reason.REQUEST_ERROR
        assert isinstance(excinfo.value.request_error, InvalidResponseError)
        assert excinfo.value.request_error.text == message


class TestConvertErrors:
    @pytest.mark.parametrize(
        ("code", "reason"),
        [
            (605, Reason.DESCRIPTION_TOO_LONG),
            (606, Reason.ACTION_NOT_AUTHORIZED),
            (718, Reason.PORT_IN_USE),
            (724, Reason.SAME_PORT_VALUES_REQUIRED),
            (725, Reason.ONLY_PERMANENT_LEASES_SUPPORTED),
        ],
    )
    def test_add_port(self, code, reason):
        err = parsing.convert_add_port_error(ErrorCodeError(code, "error"))
        assert isinstance(err, AddPortError)
        assert err.reason is reason
        assert err.request_error is None

    @pytest.mark.parametrize(
        ("code", "reason"),
        [(606, Reason.ACTION_NOT_AUTHORIZED), (714, Reason.NO_SUCH_PORT_MAPPING)],
    )
    def test_remove_port(self, code, reason):
        assert parsing.convert_remove_port_error(ErrorCodeError(code, "error")).reason is reason

    def test_unrecognized_code_is_wrapped(self):
        original = ErrorCodeError(501, "Action Failed")
        err = parsing.convert_remove_port_error(original)

        assert isinstance(err, RemovePortError)
        assert err.reason is Reason.REQUEST_ERROR
        assert err.request_error is original
        assert err.request_error.code == 501

    def test_transport_errors_are_wrapped(self):
        original = HTTPError("connection refused")
        err = parsing.convert_get_external_ip_error(original)
        assert err.reason is Reason.REQUEST_ERROR
        assert err.request_error is original

    def test_same_port_mapping_conflict(self):
        err = parsing.convert_add_same_port_mapping_error(ErrorCodeError(718, "ConflictInMappingEntry"))
        assert err.reason is Reason.EXTERNAL_PORT_IN_USE

    def test_get_external_ip_to_add_any_port(self):
        not_authorized = GetExternalIPError(Reason.ACTION_NOT_AUTHORIZED)
        assert parsing.convert_get_external_ip_to_add_any_port_error(not_authorized).reason is Reason.ACTION_NOT_AUTHORIZED

        original = InvalidResponseError("garbage")
        wrapped = parsing.convert_get_external_ip_to_add_any_port_error(GetExternalIPError.wrap(original))
        assert isinstance(wrapped, AddAnyPortError)
        assert wrapped.request_error is original
