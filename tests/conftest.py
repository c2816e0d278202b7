"""Shared fixtures: device descriptions, SOAP documents and fake requesters."""

from __future__ import annotations

import pytest

from pyigd.static import SCHEME

ENVELOPE = """<?xml version="1.0"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
<s:Body>{}</s:Body>
</s:Envelope>"""

DEVICE_DESCRIPTION = """<?xml version="1.0" encoding="UTF-8"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
   <specVersion>
      <major>1</major>
      <minor>0</minor>
   </specVersion>
   <device>
      <deviceType>urn:schemas-upnp-org:device:InternetGatewayDevice:1</deviceType>
      <friendlyName></friendlyName>
      <serviceList>
         <service>
            <serviceType>urn:schemas-upnp-org:service:Layer3Forwarding:1</serviceType>
            <serviceId>urn:upnp-org:serviceId:Layer3Forwarding1</serviceId>
            <controlURL>/ctl/L3F</controlURL>
            <eventSubURL>/evt/L3F</eventSubURL>
            <SCPDURL>/L3F.xml</SCPDURL>
         </service>
      </serviceList>
      <deviceList>
         <device>
            <deviceType>urn:schemas-upnp-org:device:WANDevice:1</deviceType>
            <friendlyName>WANDevice</friendlyName>
            <serviceList>
               <service>
                  <serviceType>urn:schemas-upnp-org:service:WANCommonInterfaceConfig:1</serviceType>
                  <serviceId>urn:upnp-org:serviceId:WANCommonIFC1</serviceId>
                  <controlURL>/ctl/CmnIfCfg</controlURL>
                  <eventSubURL>/evt/CmnIfCfg</eventSubURL>
                  <SCPDURL>/WANCfg.xml</SCPDURL>
               </service>
            </serviceList>
            <deviceList>
               <device>
                  <deviceType>urn:schemas-upnp-org:device:WANConnectionDevice:1</deviceType>
                  <friendlyName>WANConnectionDevice</friendlyName>
                  <serviceList>
                     <service>
                        <serviceType>urn:schemas-upnp-org:service:WANIPConnection:1</serviceType>
                        <serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
                        <controlURL>/ctl/IPConn</controlURL>
                        <eventSubURL>/evt/IPConn</eventSubURL>
                        <SCPDURL>/WANIPCn.xml</SCPDURL>
                     </service>
                  </serviceList>
               </device>
            </deviceList>
         </device>
      </deviceList>
      <presentationURL>http://192.168.0.1/</presentationURL>
   </device>
</root>"""


def soap_response(action: str, **fields) -> str:
    """Build a successful SOAP response for action with the given output arguments."""
    params = "".join("<{0}>{1}</{0}>".format(name, value) for name, value in fields.items())
    return ENVELOPE.format(
        '<u:{0}Response xmlns:u="{1}">{2}</u:{0}Response>'.format(action, SCHEME, params)
    )


def soap_fault(code, description: str) -> str:
    """Build a SOAP fault carrying a UPnPError."""
    return ENVELOPE.format(
        "<s:Fault>"
        "<faultcode>s:Client</faultcode>"
        "<faultstring>UPnPError</faultstring>"
        "<detail>"
        '<UPnPError xmlns="urn:schemas-upnp-org:control-1-0">'
        "<errorCode>{}</errorCode>"
        "<errorDescription>{}</errorDescription>"
        "</UPnPError>"
        "</detail>"
        "</s:Fault>".format(code, description)
    )


def ssdp_response(location: str, header: str = "LOCATION") -> bytes:
    return (
        "HTTP/1.1 200 OK\r\n"
        "CACHE-CONTROL: max-age=120\r\n"
        "ST: urn:schemas-upnp-org:device:InternetGatewayDevice:1\r\n"
        "{}: {}\r\n"
        "SERVER: Linux UPnP/1.0 MiniUPnPd/2.1\r\n"
        "\r\n".format(header, location)
    ).encode("utf-8")


class FakeRequester:
    """Blocking requester that replays scripted SOAP responses.

    Each scripted response is either response text, or a RequestError
    instance to raise. Description fetches are served from ``descriptions``
    keyed by URL.
    """

    def __init__(self, responses=(), descriptions=None):
        self.responses = list(responses)
        self.descriptions = dict(descriptions or {})
        self.requests: list[tuple[str, str]] = []
        self.fetched: list[str] = []

    def _next_response(self, action, content):
        self.requests.append((action, content))
        if not self.responses:
            raise AssertionError("unexpected request {}".format(action))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def do_request(self, url, action, content):
        return self._next_response(action, content)

    def _fetch(self, url):
        self.fetched.append(str(url))
        description = self.descriptions[str(url)]
        if isinstance(description, Exception):
            raise description
        return description.encode("utf-8")

    def fetch(self, url, timeout=None):
        return self._fetch(url)


class AsyncFakeRequester(FakeRequester):
    """Coroutine flavour of FakeRequester."""

    async def do_request(self, url, action, content):
        return self._next_response(action, content)

    async def fetch(self, url, timeout=None):
        return self._fetch(url)


def scripted_ports(*ports):
    """Port picker returning ports in order."""
    return iter(ports).__next__


@pytest.fixture
def local_addr():
    return ("192.168.1.2", 8080)
