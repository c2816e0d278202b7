from pyigd.network.requester import Requester
from pyigd.network.ssdp import SSDP, parse_search_result, decode_search_response
from pyigd.network.igd import parse_control_url, get_control_url
