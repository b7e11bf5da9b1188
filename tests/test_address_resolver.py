# tests/test_address_resolver.py
import httpx
import pytest

from conftest import geocoding_payload
from tripcheck.services.address_resolver import AddressResolver

pytestmark = pytest.mark.anyio


def make_resolver(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("access_token", "pk.test")
    kwargs.setdefault("base_url", "https://mapbox.test")
    return AddressResolver(client, **kwargs)


@pytest.mark.parametrize("query", ["", "A", "Av"])
async def test_short_query_makes_no_request(query):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=geocoding_payload("x"))

    resolver = make_resolver(handler)

    assert await resolver.resolve(query) == []
    assert calls == []


async def test_resolve_returns_candidates_in_service_order():
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(
            200,
            json=geocoding_payload(
                "Avenida Corrientes 1000, Buenos Aires, Argentina",
                "Avenida Corrientes 1000, Mendoza, Argentina",
            ),
        )

    resolver = make_resolver(handler)
    candidates = await resolver.resolve("Av. Corrientes 1000")

    assert [c.display_name for c in candidates] == [
        "Avenida Corrientes 1000, Buenos Aires, Argentina",
        "Avenida Corrientes 1000, Mendoza, Argentina",
    ]
    assert candidates[0].id == "address.0"
    assert candidates[0].coordinate.lon == pytest.approx(-58.38)
    assert candidates[0].coordinate.lat == pytest.approx(-34.60)

    url = seen["url"]
    assert url.host == "mapbox.test"
    assert url.path.startswith("/geocoding/v5/mapbox.places/")
    assert url.path.endswith(".json")
    assert url.params["country"] == "ar"
    assert url.params["limit"] == "5"
    assert url.params["access_token"] == "pk.test"


async def test_result_is_capped_at_limit():
    def handler(request):
        return httpx.Response(200, json=geocoding_payload(*[f"Calle {i}" for i in range(8)]))

    resolver = make_resolver(handler, limit=5)

    assert len(await resolver.resolve("Calle")) == 5


async def test_query_is_url_encoded_as_path_segment():
    seen = {}

    def handler(request):
        seen["raw_path"] = request.url.raw_path
        return httpx.Response(200, json=geocoding_payload())

    resolver = make_resolver(handler)
    await resolver.resolve("Santa Fe 2000/B")

    assert b"Santa%20Fe%202000%2FB.json" in seen["raw_path"]


async def test_http_error_resolves_to_empty_list():
    def handler(request):
        return httpx.Response(500, json={"message": "boom"})

    resolver = make_resolver(handler)

    assert await resolver.resolve("Av. Santa Fe") == []


async def test_network_error_resolves_to_empty_list():
    def handler(request):
        raise httpx.ConnectError("no network", request=request)

    resolver = make_resolver(handler)

    assert await resolver.resolve("Av. Santa Fe") == []


async def test_malformed_payload_resolves_to_empty_list():
    def handler(request):
        return httpx.Response(200, json={"features": [{"id": "x"}]})

    resolver = make_resolver(handler)

    assert await resolver.resolve("Av. Santa Fe") == []


async def test_non_json_body_resolves_to_empty_list():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    resolver = make_resolver(handler)

    assert await resolver.resolve("Av. Santa Fe") == []
