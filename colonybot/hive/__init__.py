"""Hive layer: colony, extraction groups, extraction sites, resource requests."""

from colonybot.hive.colony import Colony
from colonybot.hive.extraction_group import ExtractionGroup, find_nearest_group
from colonybot.hive.extraction_site import OUTPUT_PRIORITY, ExtractionSite, required_capacity
from colonybot.hive.resource_requests import ResourceRequest, ResourceRequestBroker

__all__ = [
    "OUTPUT_PRIORITY",
    "Colony",
    "ExtractionGroup",
    "ExtractionSite",
    "ResourceRequest",
    "ResourceRequestBroker",
    "find_nearest_group",
    "required_capacity",
]
