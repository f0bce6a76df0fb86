"""
Helpers for turning DnsServer cmdlet failures into readable messages.
"""

from splitdns_provision.errors import ManagementCommandError, ProvisioningStepFailed


def is_access_denied_error(stderr: str) -> bool:
    """
    Check if stderr output indicates missing rights on the DNS server.

    Args:
        stderr: Standard error output from a DnsServer cmdlet

    Returns:
        True if the error appears to be permission-related
    """
    indicators = [
        "access is denied",
        "access denied",
        "permissiondenied",
        "unauthorizedaccess",
        "win32 5",
        "not authorized",
    ]
    stderr_lower = stderr.lower()
    return any(indicator in stderr_lower for indicator in indicators)


def is_module_missing_error(stderr: str) -> bool:
    """Check if the DnsServer module (RSAT DNS tools) is not installed."""
    stderr_lower = stderr.lower()
    if "powershell not found" in stderr_lower:
        return True
    return "dnsserver" in stderr_lower and (
        "is not recognized" in stderr_lower
        or "commandnotfoundexception" in stderr_lower
        or "module could not be loaded" in stderr_lower
    )


def format_step_failure(exc: ProvisioningStepFailed) -> str:
    """
    Format a short error message for a failed provisioning step.

    Permission and missing-module problems get a hint; other cmdlet errors
    show the last line of a traceback-like stderr, or at most its last
    10 lines.
    """
    error = exc.error
    lines = [f"Provisioning failed at step '{exc.step}'"]

    if not isinstance(error, ManagementCommandError):
        lines.append(f"  {error}")
        return "\n".join(lines)

    stderr = error.stderr.strip()
    if is_access_denied_error(stderr):
        lines.append(f"  {error.cmdlet}: access denied")
        lines.append("")
        lines.append(
            "Run as a member of DnsAdmins (or Domain Admins) on the DNS server,"
        )
        lines.append("or pass --computer-name for a server you can manage.")
        return "\n".join(lines)

    if is_module_missing_error(stderr):
        lines.append(f"  {error.cmdlet}: DnsServer PowerShell module not available")
        lines.append("")
        lines.append("Install the RSAT DNS Server tools or run on the DNS server itself.")
        return "\n".join(lines)

    lines.append(f"  {error.cmdlet} (exit {error.returncode})")
    if stderr:
        err_lines = stderr.split("\n")
        # Only print the last line if it's a traceback
        if "Traceback" in stderr or "At line:" in stderr:
            lines.append(f"  {err_lines[-1].strip()}")
        else:
            for line in err_lines[-10:]:
                lines.append(f"  {line.rstrip()}")

    return "\n".join(lines)
