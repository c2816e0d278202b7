SCHEME = "urn:schemas-upnp-org:service:WANIPConnection:1"
PPP_SCHEME = "urn:schemas-upnp-org:service:WANPPPConnection:1"

SSDP_REQUEST = (
    b"M-SEARCH * HTTP/1.1\r\n"
    b"Host:239.255.255.250:1900\r\n"
    b"ST:urn:schemas-upnp-org:device:InternetGatewayDevice:1\r\n"
    b'Man:"ssdp:discover"\r\n'
    b"MX:3\r\n"
    b"\r\n"
)
SSDP_ADDRESS = ("239.255.255.250", 1900)
BIND_ADDRESS = ("0.0.0.0", 0)

# seconds
DEFAULT_TIMEOUT = 3
REQUEST_TIMEOUT = 10

MAX_RESPONSE_SIZE = 1500

# dynamic/private ports, upper bound excluded
PORT_RANGE = (32768, 65535)
MAX_RETRIES = 20

GET_EXTERNAL_IP_ADDRESS = "GetExternalIPAddress"
ADD_ANY_PORT_MAPPING = "AddAnyPortMapping"
ADD_PORT_MAPPING = "AddPortMapping"
DELETE_PORT_MAPPING = "DeletePortMapping"
GET_GENERIC_PORT_MAPPING_ENTRY = "GetGenericPortMappingEntry"
