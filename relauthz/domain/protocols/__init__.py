"""Domain protocols (ports).

Usage:
    from relauthz.domain.protocols import AuthorizationProtocol, LoggerProtocol
"""

from relauthz.domain.protocols.authorization_protocol import AuthorizationProtocol
from relauthz.domain.protocols.logger_protocol import LoggerProtocol

__all__ = ["AuthorizationProtocol", "LoggerProtocol"]
