import logging
from typing import Any, Dict, List, Optional

import httpx

from chat_relay.exceptions import UpstreamUnavailable
from chat_relay.utils.wallet import canonical_wallet


logger = logging.getLogger(__name__)

FINISHED_STATUS = "finished"


def _has_wallet(participant: Any) -> bool:
    # entries without a usable address are skipped
    if not isinstance(participant, dict):
        return False
    wallet = participant.get("walletAddress")
    return isinstance(wallet, str) and bool(wallet.strip())


class RosterGateway:
    """Client for the tournament backend's ``GET /games`` roster."""

    def __init__(self, base_url: str, timeout_s: float = 10.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_games(self) -> Dict[str, Any]:
        try:
            response = await self._client.get(f"{self.base_url}/games", timeout=self.timeout_s)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Tournament backend answered %s", e.response.status_code)
            raise UpstreamUnavailable("Failed to fetch tournament data") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Tournament backend unreachable: %s", e)
            raise UpstreamUnavailable("Failed to fetch tournament data") from e
        if not isinstance(data, dict):
            raise UpstreamUnavailable("Tournament backend returned an unexpected payload")
        return data

    async def co_participants(self, wallet: str) -> List[Dict[str, Any]]:
        """Participant records of every unfinished tournament ``wallet`` plays in.

        Records come back in roster order and may repeat across tournaments;
        the wallet's own record is included.
        """
        wallet = canonical_wallet(wallet)
        games = await self.fetch_games()
        participants: List[Dict[str, Any]] = []
        for game in games.values():
            tournaments = game.get("tournaments") if isinstance(game, dict) else None
            if not isinstance(tournaments, dict):
                continue
            for tournament in tournaments.values():
                if not isinstance(tournament, dict) or tournament.get("status") == FINISHED_STATUS:
                    continue
                roster = [p for p in tournament.get("participants") or [] if _has_wallet(p)]
                if any(canonical_wallet(p["walletAddress"]) == wallet for p in roster):
                    participants.extend(roster)
        return participants
