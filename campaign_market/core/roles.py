from __future__ import annotations

from enum import Enum


class RoleCode(str, Enum):
    ADVERTISER = "advertiser"
    INFLUENCER = "influencer"
