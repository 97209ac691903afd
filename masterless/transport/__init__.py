"""
Masterless Transports

Connections that can start commands and upload files or trees.
"""

from .base import OutputSink, PopenProcess, RemoteProcess, Transport
from .local import LocalTransport
from .ssh import SSHTransport

__all__ = [
    "OutputSink",
    "PopenProcess",
    "RemoteProcess",
    "Transport",
    "LocalTransport",
    "SSHTransport",
]
