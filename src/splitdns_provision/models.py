"""
Desired state and step results for split-horizon provisioning.
"""

import ipaddress
from dataclasses import dataclass, field

from splitdns_provision.errors import ProvisioningStepFailed

DEFAULT_ZONE_NAME = "local"
DEFAULT_INSIDE_CIDR = "10.0.3.0/26"
DEFAULT_INSIDE_NAME = "inside"
DEFAULT_OUTSIDE_CIDR = "10.0.3.64/26"
DEFAULT_OUTSIDE_NAME = "outside"

TEST_RECORD_NAME = "test"
INSIDE_RECORD_ADDRESS = "10.0.0.1"
OUTSIDE_RECORD_ADDRESS = "10.0.0.255"

STATUS_PRESENT = "present"
STATUS_CREATED = "created"
STATUS_PLANNED = "planned"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class ClientSide:
    """
    One side of the split horizon.

    The client subnet and the zone scope share ``name``. ``label`` is the
    fixed side identifier (inside/outside) and names the query resolution
    policy.
    """

    label: str
    name: str
    cidr: str
    record_address: str

    @property
    def subnet_name(self) -> str:
        return self.name

    @property
    def scope_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class DesiredState:
    zone_name: str
    inside: ClientSide
    outside: ClientSide

    @property
    def sides(self) -> tuple[ClientSide, ClientSide]:
        return (self.inside, self.outside)

    @classmethod
    def build(
        cls,
        zone_name: str = DEFAULT_ZONE_NAME,
        inside_cidr: str = DEFAULT_INSIDE_CIDR,
        inside_name: str = DEFAULT_INSIDE_NAME,
        outside_cidr: str = DEFAULT_OUTSIDE_CIDR,
        outside_name: str = DEFAULT_OUTSIDE_NAME,
    ) -> "DesiredState":
        """
        Validate raw parameters and build the desired state.

        Raises:
            ValueError: on an empty name, a malformed IPv4 CIDR or two
                sides sharing one name
        """
        zone_name = str(zone_name or "").strip()
        if not zone_name:
            raise ValueError("Zone name must not be empty")

        inside = ClientSide(
            "inside",
            _check_name(inside_name, "inside"),
            _check_cidr(inside_cidr, "inside"),
            INSIDE_RECORD_ADDRESS,
        )
        outside = ClientSide(
            "outside",
            _check_name(outside_name, "outside"),
            _check_cidr(outside_cidr, "outside"),
            OUTSIDE_RECORD_ADDRESS,
        )
        if inside.name.lower() == outside.name.lower():
            raise ValueError(
                f"Inside and outside subnets must have different names (got '{inside.name}')"
            )

        return cls(zone_name, inside, outside)


def _check_name(name: str, label: str) -> str:
    name = str(name or "").strip()
    if not name:
        raise ValueError(f"{label.capitalize()} subnet name must not be empty")
    return name


def _check_cidr(cidr: str, label: str) -> str:
    # host bits are cleared: 10.0.3.5/26 -> 10.0.3.0/26
    text = str(cidr or "").strip()
    if "/" not in text:
        raise ValueError(f"Invalid {label} subnet CIDR: {cidr!r} (missing prefix length)")
    try:
        network = ipaddress.IPv4Network(text, strict=False)
    except ValueError:
        raise ValueError(f"Invalid {label} subnet CIDR: {cidr!r}") from None
    return str(network)


@dataclass
class StepResult:
    label: str
    status: str
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED


@dataclass
class ReconciliationResult:
    steps: list[StepResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not any(step.failed for step in self.steps)

    @property
    def created(self) -> list[StepResult]:
        return [step for step in self.steps if step.status == STATUS_CREATED]

    @property
    def failed_step(self) -> StepResult | None:
        for step in self.steps:
            if step.failed:
                return step
        return None

    def raise_for_failure(self) -> None:
        failed = self.failed_step
        if failed is None:
            return
        raise ProvisioningStepFailed(failed.label, failed.error) from failed.error
