"""Clients for govc and vCenter used when building Windows stemcells."""

__version__ = "0.1.0"