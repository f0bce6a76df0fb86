"""
Utility functions for splitdns-provision CLI tools.
"""

from splitdns_provision.utils.config import (
    load_config,
    resolve_settings,
)
from splitdns_provision.utils.errors import (
    format_step_failure,
    is_access_denied_error,
    is_module_missing_error,
)

__all__ = [
    "load_config",
    "resolve_settings",
    "format_step_failure",
    "is_access_denied_error",
    "is_module_missing_error",
]
