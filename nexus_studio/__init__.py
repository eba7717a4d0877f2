"""
Nexus studio: strategic intent composition and co-pilot request routing.
"""

from .composition import Composition, resolve, mission_statement
from .routing import RequestRouter, RouteResult, ResponseEnvelope, classify, route, FALLBACK_REPLY

__version__ = "0.1.0"

__all__ = [
    "Composition",
    "resolve",
    "mission_statement",
    "RequestRouter",
    "RouteResult",
    "ResponseEnvelope",
    "classify",
    "route",
    "FALLBACK_REPLY",
]
