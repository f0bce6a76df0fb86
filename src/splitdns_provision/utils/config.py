"""
Configuration parsing utilities for splitdns-provision.

Settings come from (highest first) explicit CLI arguments, an optional
YAML config file, environment variables and built-in defaults.

Example config.yaml:

    zone_name: local
    computer_name: dc01.corp.example
    inside:
      name: inside
      cidr: 10.0.3.0/26
    outside:
      name: outside
      cidr: 10.0.3.64/26
"""

import os
from pathlib import Path

import yaml

from splitdns_provision.models import (
    DEFAULT_INSIDE_CIDR,
    DEFAULT_INSIDE_NAME,
    DEFAULT_OUTSIDE_CIDR,
    DEFAULT_OUTSIDE_NAME,
    DEFAULT_ZONE_NAME,
    DesiredState,
)


def load_config(config_path: str | None) -> dict:
    """
    Read the YAML config file.

    Args:
        config_path: Path to config.yaml (may be None)

    Returns:
        The parsed mapping, or {} when no path is given or the file is empty

    Raises:
        FileNotFoundError: if an explicit path does not exist
        ValueError: if the file is not valid YAML or does not hold a mapping
    """
    if not config_path:
        return {}

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r") as f:
        try:
            cfg = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"{config_path}: {e}") from e

    if not cfg:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level")

    return cfg


def _side(cfg: dict, key: str) -> dict:
    side = cfg.get(key) or {}
    if not isinstance(side, dict):
        raise ValueError(f"config '{key}' must be a mapping with 'name' and 'cidr'")
    return side


def _pick(*values):
    for value in values:
        if value is not None and value != "":
            return value
    return None


def resolve_settings(args, cfg: dict) -> tuple[DesiredState, dict]:
    """
    Merge CLI arguments, config file and defaults.

    Args:
        args: argparse namespace; unset options are None
        cfg: mapping returned by load_config()

    Returns:
        (desired state, runner settings) where runner settings holds
        'executable' and 'computer_name'

    Raises:
        ValueError: if the merged values do not describe a valid state
    """
    inside = _side(cfg, "inside")
    outside = _side(cfg, "outside")

    state = DesiredState.build(
        zone_name=_pick(args.zone_name, cfg.get("zone_name"), DEFAULT_ZONE_NAME),
        inside_cidr=_pick(args.inside_cidr, inside.get("cidr"), DEFAULT_INSIDE_CIDR),
        inside_name=_pick(args.inside_name, inside.get("name"), DEFAULT_INSIDE_NAME),
        outside_cidr=_pick(
            args.outside_cidr, outside.get("cidr"), DEFAULT_OUTSIDE_CIDR
        ),
        outside_name=_pick(
            args.outside_name, outside.get("name"), DEFAULT_OUTSIDE_NAME
        ),
    )

    runner = {
        "executable": _pick(
            getattr(args, "powershell", None),
            cfg.get("powershell"),
            os.environ.get("POWERSHELL"),
        ),
        "computer_name": _pick(
            getattr(args, "computer_name", None),
            cfg.get("computer_name"),
            os.environ.get("DNS_SERVER"),
        ),
    }

    return state, runner
