"""
Shared fixtures and fake DNS server for splitdns-provision tests.
"""

from pathlib import Path

import pytest

from splitdns_provision.errors import ManagementCommandError


class FakeDnsServer:
    """
    In-memory stand-in for DnsServerClient.

    Keeps zones, client subnets, zone scopes, A records and policies in
    plain containers, records every create call and can be told to fail a
    given operation.
    """

    def __init__(self):
        self.zones: dict[str, str] = {}
        self.subnets: dict[str, str] = {}
        self.scopes: dict[str, set[str]] = {}
        self.records: dict[tuple[str, str, str], list[str]] = {}
        self.policies: dict[str, dict[str, dict]] = {}
        self.creates: list[tuple] = []
        self.calls: list[str] = []
        self._failures: dict[str, ManagementCommandError] = {}

    def fail_on(self, operation: str, stderr: str = "boom") -> None:
        self._failures[operation] = ManagementCommandError(operation, 1, stderr)

    def _call(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self._failures:
            raise self._failures[operation]

    def _require_zone(self, operation: str, zone: str) -> str:
        """Return the stored zone name, failing like Windows for a missing zone."""
        for name in self.zones:
            if name.casefold() == zone.casefold():
                return name
        raise ManagementCommandError(
            operation,
            1,
            f"Failed to enumerate objects for zone {zone}.\n"
            f"FullyQualifiedErrorId : WIN32 9601,{operation}",
        )

    def add_zone(self, name: str, scopes=()) -> None:
        self.zones[name] = "Forest"
        self.scopes[name] = set(scopes)
        self.policies.setdefault(name, {})

    def list_zones(self):
        self._call("list_zones")
        return list(self.zones)

    def create_zone(self, name, replication_scope="Forest"):
        self._call("create_zone")
        self.zones[name] = replication_scope
        self.scopes.setdefault(name, set())
        self.policies.setdefault(name, {})
        self.creates.append(("zone", name))

    def list_client_subnets(self):
        self._call("list_client_subnets")
        return list(self.subnets)

    def create_client_subnet(self, name, cidr):
        self._call("create_client_subnet")
        self.subnets[name] = cidr
        self.creates.append(("subnet", name))

    def list_zone_scopes(self, zone):
        self._call("list_zone_scopes")
        zone = self._require_zone("Get-DnsServerZoneScope", zone)
        return sorted(self.scopes.get(zone, set()))

    def create_zone_scope(self, zone, name):
        self._call("create_zone_scope")
        zone = self._require_zone("Add-DnsServerZoneScope", zone)
        self.scopes.setdefault(zone, set()).add(name)
        self.creates.append(("scope", name))

    def find_a_records(self, zone, scope, name):
        self._call("find_a_records")
        zone = self._require_zone("Get-DnsServerResourceRecord", zone)
        if scope not in self.scopes.get(zone, set()):
            raise ManagementCommandError(
                "Get-DnsServerResourceRecord", 1, f"Zone scope {scope} does not exist"
            )
        return list(self.records.get((zone, scope, name), []))

    def create_a_record(self, zone, scope, name, address):
        self._call("create_a_record")
        zone = self._require_zone("Add-DnsServerResourceRecord", zone)
        self.records.setdefault((zone, scope, name), []).append(address)
        self.creates.append(("record", scope, address))

    def list_query_resolution_policies(self, zone):
        self._call("list_query_resolution_policies")
        zone = self._require_zone("Get-DnsServerQueryResolutionPolicy", zone)
        return list(self.policies.get(zone, {}))

    def create_query_resolution_policy(
        self, zone, name, subnet, scope, processing_order=1, action="ALLOW"
    ):
        self._call("create_query_resolution_policy")
        zone = self._require_zone("Add-DnsServerQueryResolutionPolicy", zone)
        self.policies.setdefault(zone, {})[name] = {
            "subnet": subnet,
            "scope": scope,
            "processing_order": processing_order,
            "action": action,
        }
        self.creates.append(("policy", name))

    def object_counts(self) -> dict[str, int]:
        return {
            "zones": len(self.zones),
            "subnets": len(self.subnets),
            "scopes": sum(len(s) for s in self.scopes.values()),
            "records": sum(len(r) for r in self.records.values()),
            "policies": sum(len(p) for p in self.policies.values()),
        }


@pytest.fixture
def fake_server():
    """A fresh, empty fake DNS server."""
    return FakeDnsServer()


@pytest.fixture
def tmp_config_file(tmp_path):
    """Create a temporary config file for testing."""

    def _create(content: str) -> Path:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(content)
        return config_file

    return _create


@pytest.fixture
def sample_config_content():
    """Sample splitdns-provision config.yaml content."""
    return """
zone_name: corp.example
computer_name: dc01.corp.example
inside:
  name: lan
  cidr: 192.168.10.0/24
outside:
  name: wan
  cidr: 192.168.20.0/24
"""
