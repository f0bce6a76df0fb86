#!/usr/bin/env python3
"""
Provision split-horizon demo DNS on a Windows DNS server.

Creates, only where missing:
- the zone (AD-integrated primary, forest replication)
- inside/outside client subnets and their zone scopes
- an A record 'test' per scope (10.0.0.1 inside, 10.0.0.255 outside)
- one query resolution policy per side, routing its subnet to its scope

Exit codes:
  0 - All steps succeeded (objects present or created)
  1 - A step failed; earlier objects are kept, re-run to resume
  2 - Invalid parameters or configuration
"""

import argparse
import logging
import os
import sys

from tabulate import tabulate

from splitdns_provision.dnsserver import DnsServerClient, PowerShellRunner
from splitdns_provision.errors import ProvisioningStepFailed
from splitdns_provision.logging import setup_logging
from splitdns_provision.models import STATUS_PLANNED, ReconciliationResult
from splitdns_provision.reconciler import Reconciler
from splitdns_provision.utils.config import load_config, resolve_settings
from splitdns_provision.utils.errors import format_step_failure

log = logging.getLogger(__name__)

POWERSHELL_STYLE_OPTIONS = (
    "-ZoneName",
    "-InsideSubnetCidr",
    "-InsideSubnetName",
    "-OutsideSubnetCidr",
    "-OutsideSubnetName",
)


def normalize_args(argv: list[str]) -> list[str]:
    """
    Rewrite PowerShell-style option names to their canonical spelling.

    PowerShell matches parameter names case-insensitively, so "-zonename"
    and "-ZONENAME=corp" are accepted as "-ZoneName".
    """
    canonical = {name.lower(): name for name in POWERSHELL_STYLE_OPTIONS}
    out = []
    for arg in argv:
        name, sep, value = arg.partition("=")
        if name.lower() in canonical:
            arg = canonical[name.lower()] + sep + value
        out.append(arg)
    return out


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Provision split-horizon demo zone, subnets, scopes and policies"
    )
    # unset options stay None so config file values can fill them in
    p.add_argument(
        "-ZoneName", "--zone-name", dest="zone_name", help="Zone name (default: local)"
    )
    p.add_argument(
        "-InsideSubnetCidr",
        "--inside-subnet-cidr",
        dest="inside_cidr",
        help="Inside client subnet (default: 10.0.3.0/26)",
    )
    p.add_argument(
        "-InsideSubnetName",
        "--inside-subnet-name",
        dest="inside_name",
        help="Inside subnet and zone scope name (default: inside)",
    )
    p.add_argument(
        "-OutsideSubnetCidr",
        "--outside-subnet-cidr",
        dest="outside_cidr",
        help="Outside client subnet (default: 10.0.3.64/26)",
    )
    p.add_argument(
        "-OutsideSubnetName",
        "--outside-subnet-name",
        dest="outside_name",
        help="Outside subnet and zone scope name (default: outside)",
    )
    p.add_argument("--config", help="Optional YAML config file")
    p.add_argument("--logging-config", help="Logging config file")
    p.add_argument("--computer-name", help="Remote DNS server (default: local host)")
    p.add_argument("--powershell", help="PowerShell executable (default: pwsh)")
    p.add_argument(
        "--dry-run", action="store_true", help="Only report what would be created"
    )
    return p


def format_summary(result: ReconciliationResult) -> str:
    rows = [[step.label, step.status] for step in result.steps]
    return tabulate(rows, headers=["Step", "Status"], tablefmt="simple")


def main() -> int:
    args = build_parser().parse_args(normalize_args(sys.argv[1:]))

    # verbosity flags
    debug = bool(os.environ.get("DEBUG"))
    quiet = bool(os.environ.get("QUIET"))

    try:
        setup_logging(args.logging_config, debug=debug, quiet=quiet)
        cfg = load_config(args.config)
        state, runner_settings = resolve_settings(args, cfg)
    except (ValueError, OSError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    runner = PowerShellRunner(**runner_settings)
    reconciler = Reconciler(DnsServerClient(runner), dry_run=args.dry_run)

    log.info(
        f"Reconciling zone '{state.zone_name}' "
        f"(inside {state.inside.name} {state.inside.cidr}, "
        f"outside {state.outside.name} {state.outside.cidr})"
    )
    result = reconciler.reconcile(state)

    print()
    print(format_summary(result))

    try:
        result.raise_for_failure()
    except ProvisioningStepFailed as e:
        print(file=sys.stderr)
        print(format_step_failure(e), file=sys.stderr)
        return 1

    created = len(result.created)
    if args.dry_run:
        planned = sum(1 for step in result.steps if step.status == STATUS_PLANNED)
        print(f"\nDry run: {planned} object{'s' if planned != 1 else ''} would be created")
    elif created:
        print(f"\n{created} object{'s' if created != 1 else ''} created")
    else:
        print("\nNo changes")

    return 0


if __name__ == "__main__":
    sys.exit(main())
