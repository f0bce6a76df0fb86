"""
CLI tools for splitdns-provision.

Entry points:
    - splitdns-provision: Create the demo zone, subnets, scopes, records and policies
"""
