import httpx
import pytest

from chat_relay.exceptions import UpstreamUnavailable
from chat_relay.services.roster_gateway import RosterGateway


GAMES = {
    "melee": {
        "tournaments": {
            "t1": {
                "status": "active",
                "participants": [
                    {"walletAddress": "0xAAAA", "platformUsername": "alice"},
                    {"walletAddress": "0xBBBB", "platformUsername": "bob", "gamertags": {"slippi": "BOB#1"}},
                ],
            },
            "t2": {
                "status": "finished",
                "participants": [
                    {"walletAddress": "0xaaaa"},
                    {"walletAddress": "0xdddd"},
                ],
            },
            "t3": {
                "status": "open",
                "participants": [
                    {"walletAddress": "0xeeee"},
                    {"walletAddress": "0xffff"},
                ],
            },
        }
    },
    "chess": {
        "tournaments": {
            "t4": {
                "status": "open",
                "participants": [
                    {"walletAddress": "0xcccc", "platformUsername": "carol"},
                    {"walletAddress": "0xaaaa"},
                ],
            }
        }
    },
    "no_tournaments": {},
}


def _gateway(handler) -> RosterGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RosterGateway("http://roster.test/", timeout_s=2.0, client=client)


@pytest.mark.asyncio
async def test_co_participants_from_unfinished_tournaments():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=GAMES)

    gateway = _gateway(handler)
    participants = await gateway.co_participants("0xaaaa")
    await gateway.aclose()

    wallets = [p["walletAddress"] for p in participants]
    assert seen == ["http://roster.test/games"]
    assert wallets == ["0xAAAA", "0xBBBB", "0xcccc", "0xaaaa"]
    assert "0xdddd" not in wallets
    assert "0xeeee" not in wallets


@pytest.mark.asyncio
async def test_error_status_raises_upstream_unavailable():
    gateway = _gateway(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(UpstreamUnavailable):
        await gateway.co_participants("0xaaaa")


@pytest.mark.asyncio
async def test_connection_failure_raises_upstream_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    gateway = _gateway(handler)
    with pytest.raises(UpstreamUnavailable):
        await gateway.fetch_games()


@pytest.mark.asyncio
async def test_invalid_payload_raises_upstream_unavailable():
    gateway = _gateway(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(UpstreamUnavailable):
        await gateway.fetch_games()

    gateway = _gateway(lambda request: httpx.Response(200, json=[1, 2]))
    with pytest.raises(UpstreamUnavailable):
        await gateway.fetch_games()


@pytest.mark.asyncio
async def test_entries_without_string_wallet_are_skipped():
    games = {
        "melee": {
            "tournaments": {
                "t1": {
                    "status": "open",
                    "participants": [
                        {"walletAddress": 123},
                        {"walletAddress": None},
                        {"walletAddress": "  "},
                        "0xnot-a-record",
                        {"walletAddress": "0xaaaa"},
                        {"walletAddress": "0xbbbb"},
                    ],
                }
            }
        }
    }
    gateway = _gateway(lambda request: httpx.Response(200, json=games))
    participants = await gateway.co_participants("0xaaaa")
    assert [p["walletAddress"] for p in participants] == ["0xaaaa", "0xbbbb"]
