import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class BracketEvents:
    def __init__(self):
        self._round_listeners: List[Callable] = []
        self._champion_listeners: List[Callable] = []

    def subscribe_round_advanced(self, callback: Callable):
        self._round_listeners.append(callback)

    def subscribe_champion(self, callback: Callable):
        self._champion_listeners.append(callback)

    async def notify_round_advanced(self, bracket_id: int, round_number: int, match_ids: List[int]):
        for listener in self._round_listeners:
            try:
                await listener(bracket_id, round_number, match_ids)
            except Exception as e:
                logger.error("Round listener error for bracket %s: %s", bracket_id, e)

    async def notify_champion(self, bracket_id: int, team_id: int):
        # Listeners run after commit, a failing one must not undo the result
        for listener in self._champion_listeners:
            try:
                await listener(bracket_id, team_id)
            except Exception as e:
                logger.error("Champion listener error for bracket %s: %s", bracket_id, e)

bracket_events = BracketEvents()
