"""Repository watcher: one module watcher per repository and submodule.

The root working tree and every initialized submodule are watched by their
own ModuleWatcher. Module names are paths relative to the parent of the root
(e.g. ``project`` and ``project/libs/core``).
"""

import logging
from collections.abc import Callable
from pathlib import Path

from gitwatcher.core.events import EventChannel
from gitwatcher.core.module_watcher import ModuleWatcher
from gitwatcher.domain.entities import MergeNotice, ModuleChange, Status

logger = logging.getLogger(__name__)

ModuleFactory = Callable[[Path], ModuleWatcher]


class RepositoryWatcher:
    """Aggregates the module watchers of a repository and its submodules.

    Channels:
        changes: ModuleChange for every module status change.
        merges: MergeNotice from any module.
        errors: Errors from any module.

    Args:
        root: Working tree root of the top-level repository.
        module_factory: Creates the ModuleWatcher for a module root.
    """

    def __init__(self, root: Path, module_factory: ModuleFactory) -> None:
        self.root = Path(root)
        self._module_factory = module_factory
        self._modules: dict[str, ModuleWatcher] = {}
        self._unsubscribers: list[Callable[[], None]] = []

        self.changes: EventChannel[ModuleChange] = EventChannel("change")
        self.merges: EventChannel[MergeNotice] = EventChannel("merge")
        self.errors: EventChannel[Exception] = EventChannel("error")

    def module_name(self, module_root: Path) -> str:
        return module_root.relative_to(self.root.parent).as_posix()

    def init(self) -> None:
        """Discover modules and start watching all of them.

        Raises:
            GitWatcherError: If submodule discovery fails.
        """
        root_module = self._module_factory(self.root)
        module_roots = [self.root] + [
            self.root / relpath for relpath in root_module.list_submodules()
        ]
        for module_root in module_roots:
            module = root_module if module_root == self.root else self._module_factory(module_root)
            self._add_module(self.module_name(module_root), module)
        for module in self._modules.values():
            module.init()

    def close(self) -> None:
        """Close every module watcher and drop subscriptions."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        for module in self._modules.values():
            module.close()
        self._modules.clear()

    def get_modules(self) -> list[str]:
        """Module names, the root module first."""
        return list(self._modules)

    def get_module_status(self, name: str) -> Status:
        """Build the status of one module immediately.

        Raises:
            KeyError: If no module has that name.
        """
        return self._modules[name].get_status()

    def get_status(self) -> dict[str, Status]:
        """Build the status of every module immediately."""
        return {name: module.get_status() for name, module in self._modules.items()}

    def _add_module(self, name: str, module: ModuleWatcher) -> None:
        logger.debug(f"Adding module {name} at {module.path}")
        self._modules[name] = module

        def forward_change(status: Status) -> None:
            self.changes.publish(ModuleChange(module=name, status=status))

        self._unsubscribers.extend(
            [
                module.changes.subscribe(forward_change),
                module.merges.subscribe(self.merges.publish),
                module.errors.subscribe(self.errors.publish),
            ]
        )
