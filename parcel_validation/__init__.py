"""Parcel geometry validation and sanitization.

Decides whether a candidate polygon may be accepted as a land parcel
boundary: structural pre-checks, engine-backed validity and safe
auto-repair, vertex budget, polygon type, and the topology checks
(boundary containment, overlap with existing parcels).
"""

__version__ = "0.1.0"
