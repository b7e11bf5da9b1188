# tripcheck/api/deps.py
from fastapi import Request

from tripcheck.services.address_resolver import AddressResolver
from tripcheck.services.route_client import RouteServiceClient


def get_resolver(request: Request) -> AddressResolver:
    return request.app.state.resolver


def get_route_client(request: Request) -> RouteServiceClient:
    return request.app.state.route_client
