"""
Thin client for the Windows DnsServer PowerShell module.

Each call runs one cmdlet through pwsh/powershell and decodes its
``ConvertTo-Json`` output. Nothing is cached: every list call reads the
server again.
"""

import json
import logging
import os
import shutil
import subprocess

from splitdns_provision.errors import ManagementCommandError

log = logging.getLogger(__name__)

POWERSHELL_CANDIDATES = ("pwsh", "powershell")


def ps_quote(value) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def format_parameters(params: dict) -> str:
    """
    Render cmdlet parameters.

    ``True`` becomes a bare switch, ``False``/``None`` are dropped, ints are
    passed as-is and everything else is single-quoted.
    """
    parts = []
    for name, value in params.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f"-{name}")
        elif isinstance(value, int):
            parts.append(f"-{name} {value}")
        else:
            parts.append(f"-{name} {ps_quote(value)}")
    return " ".join(parts)


def decode_output(stdout: str) -> list[dict]:
    """Decode ConvertTo-Json output; a single object becomes a one-item list."""
    text = (stdout or "").strip()
    if not text:
        return []
    data = json.loads(text)
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


def is_name_not_found(stderr: str) -> bool:
    """Check for DNS_ERROR_NAME_DOES_NOT_EXIST from a DnsServer cmdlet."""
    return "win32 9714" in (stderr or "").lower()


def find_powershell(executable: str | None = None) -> str | None:
    if executable:
        return executable
    env_exe = os.environ.get("POWERSHELL")
    if env_exe:
        return env_exe
    for candidate in POWERSHELL_CANDIDATES:
        path = shutil.which(candidate)
        if path:
            return path
    return None


class PowerShellRunner:
    """Runs DnsServer cmdlets, optionally against a remote ``ComputerName``."""

    def __init__(self, executable: str | None = None, computer_name: str | None = None):
        self.executable = executable
        self.computer_name = computer_name

    def build_script(self, cmdlet: str, select: list[str] | None = None, **params) -> str:
        if self.computer_name:
            params["ComputerName"] = self.computer_name
        script = f"$ErrorActionPreference = 'Stop'; {cmdlet}"
        rendered = format_parameters(params)
        if rendered:
            script += f" {rendered}"
        if select:
            script += f" | Select-Object {', '.join(select)}"
        script += " | ConvertTo-Json -Compress"
        return script

    def run(self, cmdlet: str, select: list[str] | None = None, **params) -> list[dict]:
        exe = find_powershell(self.executable)
        if not exe:
            raise ManagementCommandError(
                cmdlet,
                None,
                "PowerShell not found (install pwsh or set POWERSHELL)",
            )

        script = self.build_script(cmdlet, select, **params)
        cmd = [exe, "-NoProfile", "-NonInteractive", "-Command", script]
        log.debug("running: %s", script)

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ManagementCommandError(cmdlet, None, str(e)) from e

        if result.returncode != 0:
            raise ManagementCommandError(cmdlet, result.returncode, result.stderr)

        try:
            return decode_output(result.stdout)
        except ValueError as e:
            raise ManagementCommandError(
                cmdlet, result.returncode, f"unreadable output: {e}"
            ) from e


class DnsServerClient:
    """
    The DnsServer operations used by the reconciler.

    List calls return plain names (or addresses for records); create calls
    return nothing and raise ``ManagementCommandError`` on failure.
    """

    def __init__(self, runner: PowerShellRunner):
        self.runner = runner

    def list_zones(self) -> list[str]:
        rows = self.runner.run("Get-DnsServerZone", select=["ZoneName"])
        return [row["ZoneName"] for row in rows if row.get("ZoneName")]

    def create_zone(self, name: str, replication_scope: str = "Forest") -> None:
        self.runner.run(
            "Add-DnsServerPrimaryZone", Name=name, ReplicationScope=replication_scope
        )

    def list_client_subnets(self) -> list[str]:
        rows = self.runner.run("Get-DnsServerClientSubnet", select=["Name"])
        return [row["Name"] for row in rows if row.get("Name")]

    def create_client_subnet(self, name: str, cidr: str) -> None:
        self.runner.run("Add-DnsServerClientSubnet", Name=name, IPv4Subnet=cidr)

    def list_zone_scopes(self, zone: str) -> list[str]:
        rows = self.runner.run(
            "Get-DnsServerZoneScope", select=["ZoneScope"], ZoneName=zone
        )
        return [row["ZoneScope"] for row in rows if row.get("ZoneScope")]

    def create_zone_scope(self, zone: str, name: str) -> None:
        self.runner.run("Add-DnsServerZoneScope", ZoneName=zone, Name=name)

    def find_a_records(self, zone: str, scope: str, name: str) -> list[str]:
        """
        Addresses of the A records called ``name`` in ``zone``/``scope``.

        Only "name does not exist" (WIN32 9714) counts as no records; a
        missing zone or scope, access denied and other errors are raised.
        """
        try:
            rows = self.runner.run(
                "Get-DnsServerResourceRecord",
                select=[
                    "HostName",
                    "@{n='IPv4Address';e={$_.RecordData.IPv4Address.IPAddressToString}}",
                ],
                ZoneName=zone,
                ZoneScope=scope,
                Name=name,
                RRType="A",
            )
        except ManagementCommandError as e:
            if is_name_not_found(e.stderr):
                return []
            raise
        return [row.get("IPv4Address") for row in rows]

    def create_a_record(self, zone: str, scope: str, name: str, address: str) -> None:
        self.runner.run(
            "Add-DnsServerResourceRecord",
            ZoneName=zone,
            ZoneScope=scope,
            A=True,
            Name=name,
            IPv4Address=address,
        )

    def list_query_resolution_policies(self, zone: str) -> list[str]:
        rows = self.runner.run(
            "Get-DnsServerQueryResolutionPolicy", select=["Name"], ZoneName=zone
        )
        return [row["Name"] for row in rows if row.get("Name")]

    def create_query_resolution_policy(
        self,
        zone: str,
        name: str,
        subnet: str,
        scope: str,
        processing_order: int = 1,
        action: str = "ALLOW",
    ) -> None:
        self.runner.run(
            "Add-DnsServerQueryResolutionPolicy",
            Name=name,
            Action=action,
            ClientSubnet=f"EQ,{subnet}",
            ZoneScope=f"{scope},1",
            ZoneName=zone,
            ProcessingOrder=processing_order,
        )
