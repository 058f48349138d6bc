"""Read-only registry of the configured deployment targets."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from rep_deployer.domain.entities import DeploymentTarget
from rep_deployer.domain.errors import NotFoundError

SERVER_NOT_FOUND_MESSAGE = "Server not found"


class TargetRegistry:
    """Ordered list of deployment targets addressed by position."""

    def __init__(self, targets: Iterable[DeploymentTarget]) -> None:
        self._targets: tuple[DeploymentTarget, ...] = tuple(targets)

    def list(self) -> tuple[DeploymentTarget, ...]:
        return self._targets

    def get(self, index: int) -> DeploymentTarget:
        """Return the target at ``index`` or raise :class:`NotFoundError`."""

        if isinstance(index, bool) or not isinstance(index, int):
            raise NotFoundError(SERVER_NOT_FOUND_MESSAGE)
        if index < 0 or index >= len(self._targets):
            raise NotFoundError(SERVER_NOT_FOUND_MESSAGE)
        return self._targets[index]

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[DeploymentTarget]:
        return iter(self._targets)


__all__ = ["SERVER_NOT_FOUND_MESSAGE", "TargetRegistry"]
