from pageswap.transport.base import Transport
from pageswap.transport.http import HttpxTransport

__all__ = ["HttpxTransport", "Transport"]
