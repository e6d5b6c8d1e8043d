"""Stratum request construction for the two supported protocol variants.

stratum1 sends an ``eth_submitLogin`` authentication call carrying the
worker credentials. stratum2 sends a ``mining.subscribe`` call that only
advertises the client and protocol version.
"""

from __future__ import annotations

from .models import ProtocolVariant, Request

REQUEST_ID = 1
CLIENT_AGENT = "stratum-ping/1.0.0"
STRATUM2_VERSION = "EthereumStratum/1.0.0"

METHOD_SUBMIT_LOGIN = "eth_submitLogin"
METHOD_SUBSCRIBE = "mining.subscribe"


def build_request(variant, login: str, password: str) -> Request:
    variant = ProtocolVariant.parse(variant)
    if variant is ProtocolVariant.V1:
        return Request(id=REQUEST_ID, method=METHOD_SUBMIT_LOGIN, params=[login, password])
    return Request(id=REQUEST_ID, method=METHOD_SUBSCRIBE, params=[CLIENT_AGENT, STRATUM2_VERSION])
