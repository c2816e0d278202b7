from pyigd.models.mapping import PortMappingProtocol, PortMappingEntry
from pyigd.models.options import SearchOptions
from pyigd.models.response import RequestResponse
