"""Registry of open admin workspaces, keyed by access token."""

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Callable

from agency_admin.application.services.admin_workspace import AdminWorkspace

logger = logging.getLogger(__name__)

WorkspaceFactory = Callable[[str], AdminWorkspace]


class WorkspaceRegistry:
    """Keeps one AdminWorkspace per signed-in session.

    Least recently used workspaces are closed once `max_workspaces` is
    exceeded; a closed workspace discards results of calls still in flight.
    """

    def __init__(self, factory: WorkspaceFactory, max_workspaces: int = 100) -> None:
        self._factory = factory
        self._max = max_workspaces
        self._workspaces: OrderedDict[str, AdminWorkspace] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get_or_restore(self, access_token: str) -> AdminWorkspace | None:
        """Return the workspace for `access_token`, restoring the session on first use.

        Returns None when the token does not resolve to a user.
        """
        async with self._lock:
            workspace = self._workspaces.get(access_token)
            if workspace is not None:
                self._workspaces.move_to_end(access_token)
                return workspace

            workspace = self._factory(access_token)
            result = await workspace.auth.restore(access_token)
            if not result.success:
                workspace.close()
                return None

            self._add(access_token, workspace)
            return workspace

    def register(self, access_token: str, workspace: AdminWorkspace) -> None:
        self._add(access_token, workspace)

    def close(self, access_token: str) -> None:
        workspace = self._workspaces.pop(access_token, None)
        if workspace is not None:
            workspace.close()

    def close_all(self) -> None:
        for workspace in self._workspaces.values():
            workspace.close()
        self._workspaces.clear()

    def __len__(self) -> int:
        return len(self._workspaces)

    def _add(self, access_token: str, workspace: AdminWorkspace) -> None:
        previous = self._workspaces.pop(access_token, None)
        if previous is not None and previous is not workspace:
            previous.close()
        self._workspaces[access_token] = workspace
        while len(self._workspaces) > self._max:
            _, evicted = self._workspaces.popitem(last=False)
            evicted.close()
            logger.info("Evicted idle admin workspace (%d open)", len(self._workspaces))
