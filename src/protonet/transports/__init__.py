"""Transports: the network collaborators behind ``HttpClient``."""

from protonet.transports.base import Transport, TransportCall
from protonet.transports.http import HttpxTransport
from protonet.transports.mock import MockTransport

__all__ = ["HttpxTransport", "MockTransport", "Transport", "TransportCall"]
