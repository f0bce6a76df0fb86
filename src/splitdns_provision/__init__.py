"""
splitdns-provision: split-horizon DNS demo provisioning.

Reconciles a zone, two client subnets, two zone scopes, a per-scope test
record and two query resolution policies on a Windows DNS server.
"""

__version__ = "0.1.0"
