from enum import Enum
from typing import Optional


class IGDError(Exception):
    """
    Base class for every error raised by pyigd
    """


class RequestError(IGDError):
    """
    Errors that can occur when sending a request to the gateway
    """


class HTTPError(RequestError):
    """
    The HTTP client failed to complete the request
    """


class RequestIOError(RequestError):
    """
    The request failed at the socket level (includes timeouts)
    """


class InvalidResponseError(RequestError):
    def __init__(self, text: str):
        """
        text - raw response that could not be understood, kept for diagnostics
        """

        super().__init__("Invalid response from gateway: {}".format(text))
        self.text = text


class ErrorCodeError(RequestError):
    def __init__(self, code: int, description: str):
        """
        code - UPnP error code reported by the gateway
        description - errorDescription reported alongside the code
        """

        super().__init__("Gateway response error {}: {}".format(code, description))
        self.code = code
        self.description = description


class SearchError(IGDError):
    """
    Errors that can occur while trying to find the gateway
    """


class SearchHTTPError(SearchError):
    pass


class SearchIOError(SearchError):
    pass


class SearchTimeoutError(SearchIOError):
    pass


class SearchUnicodeError(SearchError):
    pass


class SearchXMLError(SearchError):
    pass


class InvalidSearchResponseError(SearchError):
    pass


class Reason(Enum):
    ACTION_NOT_AUTHORIZED = "ActionNotAuthorized"
    INTERNAL_PORT_ZERO_INVALID = "InternalPortZeroInvalid"
    EXTERNAL_PORT_ZERO_INVALID = "ExternalPortZeroInvalid"
    NO_PORTS_AVAILABLE = "NoPortsAvailable"
    EXTERNAL_PORT_IN_USE = "ExternalPortInUse"
    PORT_IN_USE = "PortInUse"
    SAME_PORT_VALUES_REQUIRED = "SamePortValuesRequired"
    ONLY_PERMANENT_LEASES_SUPPORTED = "OnlyPermanentLeasesSupported"
    DESCRIPTION_TOO_LONG = "DescriptionTooLong"
    NO_SUCH_PORT_MAPPING = "NoSuchPortMapping"
    SPECIFIED_ARRAY_INDEX_INVALID = "SpecifiedArrayIndexInvalid"
    REQUEST_ERROR = "RequestError"


MESSAGES = {
    Reason.ACTION_NOT_AUTHORIZED: "The client is not authorized to perform the operation",
    Reason.INTERNAL_PORT_ZERO_INVALID: "Can not add a mapping for local port 0",
    Reason.EXTERNAL_PORT_ZERO_INVALID: "External port number 0 (any port) is considered invalid by the gateway",
    Reason.NO_PORTS_AVAILABLE: "The gateway does not have any free ports",
    Reason.EXTERNAL_PORT_IN_USE: (
        "The gateway can only map internal ports to same-numbered external ports "
        "and this external port is in use"
    ),
    Reason.PORT_IN_USE: "The requested mapping conflicts with a mapping assigned to another client",
    Reason.SAME_PORT_VALUES_REQUIRED: (
        "The gateway requires that the requested internal and external ports are the same"
    ),
    Reason.ONLY_PERMANENT_LEASES_SUPPORTED: (
        "The gateway only supports permanent leases (ie. a lease duration of 0)"
    ),
    Reason.DESCRIPTION_TOO_LONG: "The description was too long for the gateway to handle",
    Reason.NO_SUCH_PORT_MAPPING: "The port was not mapped",
    Reason.SPECIFIED_ARRAY_INDEX_INVALID: "The port mapping index is out of range",
    Reason.REQUEST_ERROR: "Request error",
}


class OperationError(IGDError):
    """
    Error returned by one gateway operation

    Every operation accepts a closed set of reasons. A gateway error code
    the operation does not recognize is kept as Reason.REQUEST_ERROR with
    the original RequestError in request_error.
    """

    reasons = frozenset()

    def __init__(self, reason: Reason, request_error: Optional[RequestError]=None):
        """
        reason - why the operation failed, must be one of the class's reasons
        request_error - underlying error, required for Reason.REQUEST_ERROR only
        """

        if reason not in self.reasons:
            raise ValueError("{} is not a valid reason for {}".format(reason, type(self).__name__))
        if (reason is Reason.REQUEST_ERROR) != (request_error is not None):
            raise ValueError("request_error must be given exactly for Reason.REQUEST_ERROR")

        message = MESSAGES[reason]
        if request_error is not None:
            message = "{}. {}".format(message, request_error)
        super().__init__(message)

        self.reason = reason
        self.request_error = request_error

    @classmethod
    def wrap(cls, request_error: RequestError) -> "OperationError":
        return cls(Reason.REQUEST_ERROR, request_error)


class GetExternalIPError(OperationError):
    reasons = frozenset({
        Reason.ACTION_NOT_AUTHORIZED,
        Reason.REQUEST_ERROR,
    })


class RemovePortError(OperationError):
    reasons = frozenset({
        Reason.ACTION_NOT_AUTHORIZED,
        Reason.NO_SUCH_PORT_MAPPING,
        Reason.REQUEST_ERROR,
    })


class AddAnyPortError(OperationError):
    """
    Errors returned by Gateway.add_any_port and Gateway.get_any_address
    """

    reasons = frozenset({
        Reason.ACTION_NOT_AUTHORIZED,
        Reason.INTERNAL_PORT_ZERO_INVALID,
        Reason.NO_PORTS_AVAILABLE,
        Reason.EXTERNAL_PORT_IN_USE,
        Reason.ONLY_PERMANENT_LEASES_SUPPORTED,
        Reason.DESCRIPTION_TOO_LONG,
        Reason.REQUEST_ERROR,
    })


class AddPortError(OperationError):
    reasons = frozenset({
        Reason.ACTION_NOT_AUTHORIZED,
        Reason.INTERNAL_PORT_ZERO_INVALID,
        Reason.EXTERNAL_PORT_ZERO_INVALID,
        Reason.PORT_IN_USE,
        Reason.SAME_PORT_VALUES_REQUIRED,
        Reason.ONLY_PERMANENT_LEASES_SUPPORTED,
        Reason.DESCRIPTION_TOO_LONG,
        Reason.REQUEST_ERROR,
    })


class GetGenericPortMappingEntryError(OperationError):
    reasons = frozenset({
        Reason.ACTION_NOT_AUTHORIZED,
        Reason.SPECIFIED_ARRAY_INDEX_INVALID,
        Reason.REQUEST_ERROR,
    })
