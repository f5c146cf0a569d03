"""State shared between the ban-sync poll loop and its command handlers."""

from typing import Optional, Set, Tuple


class ForceSyncRequest:
    """A single pending force sync, optionally scoped to one guild.

    A new request overwrites one that has not been consumed yet.
    """

    def __init__(self):
        self._pending = False
        self._server_id: Optional[int] = None

    @property
    def pending(self) -> bool:
        return self._pending

    def request(self, server_id: Optional[int] = None):
        self._pending = True
        self._server_id = server_id

    def consume(self) -> Tuple[bool, Optional[int]]:
        # No await in here, so a command handler can never run in between.
        pending, server_id = self._pending, self._server_id
        self._pending = False
        self._server_id = None
        return pending, server_id


class BanSyncState:
    def __init__(self):
        # None until the first successful fetch of the main server's bans
        self.previous_bans: Optional[Set[int]] = None
        self.newly_joined_guilds: Set[int] = set()
        self.force_sync = ForceSyncRequest()

    def drain_newly_joined(self) -> Set[int]:
        guild_ids = self.newly_joined_guilds
        self.newly_joined_guilds = set()
        return guild_ids
