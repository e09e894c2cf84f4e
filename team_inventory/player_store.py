"""
Roster of players.

Names are unique case-insensitively: adding a name that already exists hands
back the existing player instead of creating a second one, which is what keeps
repeated roster imports idempotent.
"""
from typing import Dict, Iterable, List, Optional

from . import schemas
from .errors import NotFoundError
from .validators import clean_name


class PlayerStore:
    def __init__(self, players: Optional[Iterable[schemas.Player]] = None):
        self._players: Dict[str, schemas.Player] = {}
        if players:
            self.load(players)

    def load(self, players: Iterable[schemas.Player]) -> None:
        self._players = {player.id: player for player in players}

    def add(self, name: str, jersey_number: Optional[int] = None) -> schemas.Player:
        """
        Add a player, or return the existing one with the same name.

        Args:
            name: Player name; surrounding whitespace is trimmed
            jersey_number: Optional jersey number

        Returns:
            The created player, or the existing player unchanged

        Raises:
            ValidationError: If the name is blank
        """
        trimmed = clean_name(name)

        existing = self.find_by_name(trimmed)
        if existing is not None:
            return existing

        player = schemas.Player(name=trimmed, jersey_number=jersey_number)
        self._players[player.id] = player
        return player

    def remove(self, player_id: str) -> schemas.Player:
        """
        Delete a player. Outstanding assignments must be checked in first.

        Raises:
            NotFoundError: If the player does not exist
        """
        if player_id not in self._players:
            raise NotFoundError("player", player_id)
        return self._players.pop(player_id)

    def clear(self) -> None:
        self._players.clear()

    def find(self, player_id: str) -> Optional[schemas.Player]:
        return self._players.get(player_id)

    def get(self, player_id: str) -> schemas.Player:
        player = self._players.get(player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        return player

    def find_by_name(self, name: str) -> Optional[schemas.Player]:
        wanted = name.strip().lower()
        return next(
            (p for p in self._players.values() if p.name.lower() == wanted),
            None,
        )

    def list(self) -> List[schemas.Player]:
        """Players ordered by name."""
        return sorted(self._players.values(), key=lambda p: p.name)

    def __len__(self) -> int:
        return len(self._players)
