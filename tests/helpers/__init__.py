"""Test helper utilities."""

from .fs import RouteSpec, build_route_tree, route_text, write_reference, write_route

__all__ = [
    "RouteSpec",
    "build_route_tree",
    "route_text",
    "write_reference",
    "write_route",
]
