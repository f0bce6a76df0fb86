"""
Idempotent reconciliation of the split-horizon demo objects.

Steps run in a fixed order (zone, inside side, outside side, inside policy,
outside policy). Every step lists what the server already has and creates
the object only when its name is missing. The run stops at the first failed
step; objects created by earlier steps are left in place, so re-running is
the recovery path.
"""

import logging
from typing import Callable

from splitdns_provision.dnsserver import DnsServerClient
from splitdns_provision.errors import ManagementCommandError
from splitdns_provision.models import (
    STATUS_CREATED,
    STATUS_FAILED,
    STATUS_PLANNED,
    STATUS_PRESENT,
    TEST_RECORD_NAME,
    ClientSide,
    DesiredState,
    ReconciliationResult,
    StepResult,
)

log = logging.getLogger(__name__)

POLICY_PROCESSING_ORDER = 1
POLICY_ACTION = "ALLOW"
ZONE_REPLICATION_SCOPE = "Forest"


def _contains(names: list[str], name: str) -> bool:
    # Windows DNS object names are case-insensitive
    wanted = name.casefold()
    return any(n.casefold() == wanted for n in names)


def _when(present: bool, exists: Callable[[], bool]) -> Callable[[], bool] | None:
    return exists if present else None


class Reconciler:
    def __init__(self, server: DnsServerClient, dry_run: bool = False):
        self.server = server
        self.dry_run = dry_run

    def _step(
        self,
        label: str,
        what: str,
        exists: Callable[[], bool] | None,
        create: Callable[[], None],
    ) -> StepResult:
        # exists=None: the parent object is only planned, so there is nothing to read
        extra = {"step": label}
        try:
            if exists is not None and exists():
                log.info(f"{what} present", extra=extra)
                return StepResult(label, STATUS_PRESENT)

            if self.dry_run:
                log.info(f"{what} missing, would create", extra=extra)
                return StepResult(label, STATUS_PLANNED)

            create()
        except ManagementCommandError as e:
            log.error(f"{what} failed: {e}", extra=extra)
            return StepResult(label, STATUS_FAILED, e)

        log.info(f"{what} created", extra=extra)
        return StepResult(label, STATUS_CREATED)

    def ensure_zone(self, zone_name: str) -> StepResult:
        return self._step(
            f"zone {zone_name}",
            f"Zone '{zone_name}'",
            lambda: _contains(self.server.list_zones(), zone_name),
            lambda: self.server.create_zone(zone_name, ZONE_REPLICATION_SCOPE),
        )

    def ensure_subnet(self, name: str, cidr: str) -> StepResult:
        return self._step(
            f"subnet {name}",
            f"Client subnet '{name}' ({cidr})",
            lambda: _contains(self.server.list_client_subnets(), name),
            lambda: self.server.create_client_subnet(name, cidr),
        )

    def ensure_scope(
        self, zone_name: str, scope_name: str, zone_present: bool = True
    ) -> StepResult:
        return self._step(
            f"scope {scope_name}",
            f"Zone scope '{scope_name}' in '{zone_name}'",
            _when(
                zone_present,
                lambda: _contains(self.server.list_zone_scopes(zone_name), scope_name),
            ),
            lambda: self.server.create_zone_scope(zone_name, scope_name),
        )

    def ensure_record(
        self, zone_name: str, scope_name: str, address: str, scope_present: bool = True
    ) -> StepResult:
        # any existing 'test' A record counts, whatever its address
        return self._step(
            f"record {TEST_RECORD_NAME}.{scope_name}",
            f"A record '{TEST_RECORD_NAME}' -> {address} in scope '{scope_name}'",
            _when(
                scope_present,
                lambda: bool(
                    self.server.find_a_records(zone_name, scope_name, TEST_RECORD_NAME)
                ),
            ),
            lambda: self.server.create_a_record(
                zone_name, scope_name, TEST_RECORD_NAME, address
            ),
        )

    def ensure_side(
        self, zone_name: str, side: ClientSide, zone_present: bool = True
    ) -> list[StepResult]:
        """
        Subnet, then scope, then record; stops at the first failure.

        With ``zone_present=False`` (dry run, zone only planned) the scope and
        record are reported as planned without querying the server.
        """
        results = [self.ensure_subnet(side.subnet_name, side.cidr)]
        if results[-1].failed:
            return results

        results.append(self.ensure_scope(zone_name, side.scope_name, zone_present))
        if results[-1].failed:
            return results

        scope_present = results[-1].status != STATUS_PLANNED
        results.append(
            self.ensure_record(
                zone_name, side.scope_name, side.record_address, scope_present
            )
        )
        return results

    def ensure_policy(
        self,
        zone_name: str,
        side: str,
        subnet_name: str,
        scope_name: str,
        zone_present: bool = True,
    ) -> StepResult:
        return self._step(
            f"policy {side}",
            f"Query resolution policy '{side}' ({subnet_name} -> {scope_name})",
            _when(
                zone_present,
                lambda: _contains(
                    self.server.list_query_resolution_policies(zone_name), side
                ),
            ),
            lambda: self.server.create_query_resolution_policy(
                zone_name,
                side,
                subnet_name,
                scope_name,
                processing_order=POLICY_PROCESSING_ORDER,
                action=POLICY_ACTION,
            ),
        )

    def reconcile(self, state: DesiredState) -> ReconciliationResult:
        """
        Run every step against the server and collect the results.

        Args:
            state: zone name plus the inside/outside subnet-scope pairs

        Returns:
            ReconciliationResult with one entry per attempted step; a failed
            step is always the last entry
        """
        zone = state.zone_name
        result = ReconciliationResult()

        zone_result = self.ensure_zone(zone)
        result.steps.append(zone_result)
        if zone_result.failed:
            log.warning(
                "Aborting: remaining steps skipped",
                extra={"step": zone_result.label},
            )
            return result

        # a planned zone cannot be queried for scopes, records or policies
        zone_present = zone_result.status != STATUS_PLANNED

        stages = []
        for side in state.sides:
            stages.append(lambda side=side: self.ensure_side(zone, side, zone_present))
        for side in state.sides:
            stages.append(
                lambda side=side: [
                    self.ensure_policy(
                        zone,
                        side.label,
                        side.subnet_name,
                        side.scope_name,
                        zone_present,
                    )
                ]
            )

        for stage in stages:
            step_results = stage()
            result.steps.extend(step_results)
            if any(r.failed for r in step_results):
                log.warning(
                    "Aborting: remaining steps skipped",
                    extra={"step": result.failed_step.label},
                )
                break

        return result
