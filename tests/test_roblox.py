import asyncio

import pytest
from conftest import FakeResponse, FakeSession, network_error

from syncbots.roblox import (
    Badge,
    RobloxUser,
    classify_badges,
    fetch_badges,
    resolve_universe,
    resolve_user,
)


async def test_numeric_query_is_looked_up_by_id():
    def handler(method, url, params, json):
        assert (method, url) == ("GET", "https://users.roblox.com/v1/users/156")
        return FakeResponse(payload={"id": 156, "name": "builderman", "displayName": "Builder"})

    user = await resolve_user(FakeSession(handler), "156")

    assert user == RobloxUser(156, "builderman", "Builder")


async def test_username_query_uses_batch_lookup():
    session = FakeSession(
        lambda method, url, params, json: FakeResponse(
            payload={
                "data": [
                    {
                        "requestedUsername": "Builderman",
                        "id": 156,
                        "name": "builderman",
                        "displayName": "Builder",
                    }
                ]
            }
        )
    )

    user = await resolve_user(session, "Builderman")

    method, url, _, payload = session.requests[0]
    assert (method, url) == ("POST", "https://users.roblox.com/v1/usernames/users")
    assert payload["usernames"] == ["Builderman"]
    assert user == RobloxUser(156, "builderman", "Builder")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status=404, payload={}),
        FakeResponse(payload={"data": []}),
        FakeResponse(payload=ValueError("bad json")),
        FakeResponse(payload=None),
    ],
)
async def test_unresolvable_username(response):
    session = FakeSession(lambda *args: response)

    assert await resolve_user(session, "nobody") is None


async def test_user_lookup_network_error():
    assert await resolve_user(FakeSession(lambda *args: network_error()), "1") is None


async def test_resolve_universe():
    def handler(method, url, params, json):
        assert url == "https://apis.roblox.com/universes/v1/places/920587237/universe"
        return FakeResponse(payload={"universeId": 383310974})

    assert await resolve_universe(FakeSession(handler), "920587237") == 383310974


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status=400, payload={}),
        FakeResponse(payload={"universeId": None}),
        FakeResponse(payload=None),
    ],
)
async def test_unresolvable_universe(response):
    assert await resolve_universe(FakeSession(lambda *args: response), "1") is None


def paged_catalog(pages, final=None):
    def handler(method, url, params, json):
        assert url == "https://badges.roblox.com/v1/universes/77/badges"
        assert params["limit"] == 100
        index = int(params.get("cursor", 0))
        if index >= len(pages):
            return final
        next_cursor = str(index + 1) if index + 1 < len(pages) or final else None
        return FakeResponse(payload={"data": pages[index], "nextPageCursor": next_cursor})

    return handler


async def test_fetch_badges_follows_cursors():
    pages = [
        [{"id": 1, "name": "One"}, {"id": 2, "name": "Two"}],
        [{"id": 3, "name": "Three"}],
    ]
    session = FakeSession(paged_catalog(pages))

    badges = await fetch_badges(session, 77)

    assert badges == [Badge(1, "One"), Badge(2, "Two"), Badge(3, "Three")]
    assert "cursor" not in session.requests[0][2]
    assert session.requests[1][2]["cursor"] == "1"


async def test_fetch_badges_stops_on_error_response():
    pages = [[{"id": 1, "name": "One"}]]
    session = FakeSession(paged_catalog(pages, final=FakeResponse(status=500)))

    assert await fetch_badges(session, 77) == [Badge(1, "One")]


async def test_fetch_badges_keeps_partial_catalog_on_network_error():
    pages = [[{"id": 1, "name": "One"}]]
    session = FakeSession(paged_catalog(pages, final=network_error()))

    assert await fetch_badges(session, 77) == [Badge(1, "One")]


def award_handler(owned, failing=()):
    in_flight = {"now": 0, "max": 0}

    class TrackedResponse(FakeResponse):
        async def __aenter__(self):
            in_flight["now"] += 1
            in_flight["max"] = max(in_flight["max"], in_flight["now"])
            try:
                await asyncio.sleep(0)
                return await super().__aenter__()
            finally:
                in_flight["now"] -= 1

    def handler(method, url, params, json):
        badge_id = int(url.split("/")[-2])
        assert url == f"https://badges.roblox.com/v1/users/9/badges/{badge_id}/awarded-date"
        if badge_id in failing:
            return TrackedResponse(error=network_error().error)
        return TrackedResponse(status=200 if badge_id in owned else 404)

    return handler, in_flight


@pytest.mark.parametrize("workers", [1, 5])
async def test_classification_is_independent_of_worker_count(workers):
    catalog = [Badge(i, f"Badge {i}") for i in range(1, 24)]
    owned = {2, 3, 5, 7, 11, 13, 17, 19, 23}
    handler, in_flight = award_handler(owned, failing={4})
    session = FakeSession(handler)

    result = await classify_badges(session, 9, catalog, workers=workers)

    assert result.obtained == [badge for badge in catalog if badge.id in owned]
    assert result.missing == [badge for badge in catalog if badge.id not in owned]
    assert len(session.requests) == len(catalog)
    assert in_flight["max"] <= workers


async def test_classify_empty_catalog():
    result = await classify_badges(FakeSession(lambda *args: None), 9, [])

    assert result.obtained == [] and result.missing == []


async def test_numeric_lookup_with_empty_body():
    session = FakeSession(lambda *args: FakeResponse(payload=None))

    assert await resolve_user(session, "156") is None


async def test_fetch_badges_treats_empty_body_as_last_page():
    pages = [[{"id": 1, "name": "One"}]]
    session = FakeSession(paged_catalog(pages, final=FakeResponse(payload=None)))

    assert await fetch_badges(session, 77) == [Badge(1, "One")]
