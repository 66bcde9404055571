"""
Hook dispatcher - fan a lifecycle event out to every loaded extension.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from assetkit.extensions.errors import HookError
from assetkit.extensions.models import DispatchReport
from assetkit.logging import get_logger

if TYPE_CHECKING:
    from assetkit.events import LifecycleEvent
    from assetkit.extensions.registry import ExtensionRegistry

logger = get_logger("dispatcher")


class HookDispatcher:
    """
    Delivers lifecycle events to loaded sandboxes in registry order.

    Delivery is synchronous: ``dispatch`` returns only after every loaded
    extension has seen the event. A failing hook is logged and recorded in
    the report; the remaining extensions still receive the event and the
    failed call is not retried.
    """

    def __init__(self, registry: ExtensionRegistry) -> None:
        self.registry = registry

    def dispatch(self, event: LifecycleEvent) -> DispatchReport:
        """
        Invoke the hook matching ``event`` on every loaded extension.

        Returns:
            DispatchReport listing where the hook ran, where it was not
            defined, and which invocations failed.
        """
        hook_name = event.hook_name
        args = event.hook_args()
        report = DispatchReport(hook_name=hook_name)

        for descriptor, sandbox in self.registry.loaded():
            try:
                ran = sandbox.invoke_hook(hook_name, *args)
            except HookError as e:
                logger.error("%s", e)
                report.failures.append(e)
                continue
            if ran:
                report.delivered.append(descriptor.id)
            else:
                report.skipped.append(descriptor.id)

        if report.ok:
            logger.debug(
                "Dispatched %s to %d extensions (%d without hook)",
                hook_name,
                len(report.delivered),
                len(report.skipped),
            )
        else:
            logger.warning(
                "Dispatched %s with %d failures: %s",
                hook_name,
                len(report.failures),
                ", ".join(f.extension_id for f in report.failures),
            )
        return report

    notify = dispatch
