"""
Control Plane Components for the multi-tenant SaaS admin console

The control plane models tenants, plans, entitlements, lifecycle transitions,
audit history and usage analytics behind a request/response contract that the
console pages call as if it were a remote API.
"""

from .bootstrap import ControlPlane, build_control_plane
from .errors import ApiError, ForbiddenError, NotFoundError, ValidationError

__version__ = "1.0.0"

__all__ = [
    "ControlPlane",
    "build_control_plane",
    "ApiError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
]
