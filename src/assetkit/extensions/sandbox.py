"""
Script sandbox: one isolated interpreter namespace per extension.

An extension script is Python source executed into a private globals
dictionary whose builtins are restricted and whose imports go through an
allow-list. Module-level variables of the script (counters, caches) live
in that dictionary only, so closing the sandbox discards them.

The hooks the script defines are resolved once, right after execution::

    name = "Asset statistics"
    created = 0

    def on_asset_created(payload):
        global created
        created += 1
        log("created %d" % created)

A hook that is not defined is not an error: the extension simply does not
observe that event.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable
from pathlib import Path
from typing import Any

from assetkit.config import DEFAULT_ALLOWED_MODULES
from assetkit.extensions.bridge import HostBridge
from assetkit.extensions.errors import HookError, LoadError
from assetkit.extensions.models import KNOWN_HOOKS, METADATA_FIELDS
from assetkit.logging import get_logger

logger = get_logger("sandbox")

# Safe builtins exposed to extension scripts
_SAFE_BUILTINS: dict[str, Any] = {
    # Types
    "bool": bool,
    "bytes": bytes,
    "dict": dict,
    "float": float,
    "frozenset": frozenset,
    "int": int,
    "list": list,
    "object": object,
    "set": set,
    "str": str,
    "tuple": tuple,
    # Iteration
    "enumerate": enumerate,
    "filter": filter,
    "iter": iter,
    "map": map,
    "next": next,
    "range": range,
    "reversed": reversed,
    "sorted": sorted,
    "zip": zip,
    # Inspection
    "callable": callable,
    "getattr": getattr,
    "hasattr": hasattr,
    "isinstance": isinstance,
    "issubclass": issubclass,
    "len": len,
    "type": type,
    # Math
    "abs": abs,
    "divmod": divmod,
    "max": max,
    "min": min,
    "pow": pow,
    "round": round,
    "sum": sum,
    # Logic
    "all": all,
    "any": any,
    # Representation
    "repr": repr,
    "format": format,
    # Class support
    "__build_class__": builtins.__build_class__,
    "property": property,
    "staticmethod": staticmethod,
    "classmethod": classmethod,
    "super": super,
    # Constants
    "True": True,
    "False": False,
    "None": None,
    # Exceptions (needed for try/except in script code)
    "Exception": Exception,
    "ValueError": ValueError,
    "TypeError": TypeError,
    "KeyError": KeyError,
    "IndexError": IndexError,
    "AttributeError": AttributeError,
    "RuntimeError": RuntimeError,
    "ZeroDivisionError": ZeroDivisionError,
    "StopIteration": StopIteration,
    "ImportError": ImportError,
}

HookFn = Callable[..., Any]


class ScriptSandbox:
    """
    One extension script bound to its own restricted namespace.

    Lifecycle: ``execute()`` once, then any number of ``invoke_hook()``
    calls, then ``close()``. A sandbox is never reused for another
    extension or re-executed after closing.

    Args:
        extension_id: Id of the extension this sandbox runs.
        source_path: Path to the script.
        bridge: Host bridge to inject; a new one is created when omitted.
        allowed_modules: Module names the script may import.
    """

    def __init__(
        self,
        extension_id: str,
        source_path: Path,
        bridge: HostBridge | None = None,
        allowed_modules: list[str] | None = None,
    ) -> None:
        self.extension_id = extension_id
        self.source_path = Path(source_path)
        self.bridge = bridge or HostBridge(extension_id)
        self.allowed_modules = (
            list(allowed_modules) if allowed_modules is not None else list(DEFAULT_ALLOWED_MODULES)
        )

        self._namespace: dict[str, Any] = {}
        self._hooks: dict[str, HookFn | None] = {}
        self._metadata: dict[str, str] = {}
        self._executed = False
        self._closed = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def execute(self) -> None:
        """
        Run the script and resolve its hook table and metadata.

        Raises:
            LoadError: The script could not be read or compiled, raised while
                running, or bound a hook name to something not callable.
        """
        if self._closed:
            raise LoadError(self.extension_id, "sandbox is closed")
        if self._executed:
            raise LoadError(self.extension_id, "script already executed")

        try:
            source = self.source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(self.extension_id, f"cannot read {self.source_path}: {e}") from e

        namespace = self._build_namespace()
        try:
            compiled = compile(source, str(self.source_path), "exec")
            exec(compiled, namespace)  # noqa: S102
        except (Exception, SystemExit) as e:
            raise LoadError(self.extension_id, f"{type(e).__name__}: {e}") from e

        hooks: dict[str, HookFn | None] = {}
        for hook_name in KNOWN_HOOKS:
            fn = namespace.get(hook_name)
            if fn is not None and not callable(fn):
                raise LoadError(
                    self.extension_id,
                    f"'{hook_name}' must be a function, got {type(fn).__name__}",
                )
            hooks[hook_name] = fn

        metadata: dict[str, str] = {}
        for key in METADATA_FIELDS:
            value = namespace.get(key)
            if value is None:
                continue
            if isinstance(value, str):
                metadata[key] = value
            else:
                logger.warning(
                    "Extension %s: ignoring non-string metadata field '%s'",
                    self.extension_id,
                    key,
                )

        self._namespace = namespace
        self._hooks = hooks
        self._metadata = metadata
        self._executed = True
        logger.debug(
            "Executed %s (hooks: %s)",
            self.extension_id,
            ", ".join(sorted(n for n, fn in hooks.items() if fn is not None)) or "none",
        )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def has_hook(self, name: str) -> bool:
        return self._resolve(name) is not None

    def invoke_hook(self, name: str, *args: Any) -> bool:
        """
        Call hook ``name`` with ``args``.

        Returns:
            True if the hook exists and ran, False if the script does not
            define it.

        Raises:
            HookError: The hook raised, or the sandbox is not usable.
        """
        if self._closed:
            raise HookError(self.extension_id, name, "sandbox is closed")
        if not self._executed:
            raise HookError(self.extension_id, name, "script has not been executed")

        fn = self._resolve(name)
        if fn is None:
            return False

        try:
            fn(*args)
        except (Exception, SystemExit) as e:
            raise HookError(self.extension_id, name, f"{type(e).__name__}: {e}") from e
        return True

    def _resolve(self, name: str) -> HookFn | None:
        if name in self._hooks:
            return self._hooks[name]
        # Custom event hooks are looked up by name on demand
        if not name.startswith("on_"):
            return None
        fn = self._namespace.get(name)
        return fn if callable(fn) else None

    # ------------------------------------------------------------------
    # Introspection / teardown
    # ------------------------------------------------------------------

    @property
    def metadata(self) -> dict[str, str]:
        return dict(self._metadata)

    @property
    def closed(self) -> bool:
        return self._closed

    def lookup(self, name: str, default: Any = None) -> Any:
        """Read a module-level value of the script."""
        return self._namespace.get(name, default)

    def close(self) -> None:
        """Release the script namespace. Safe to call more than once."""
        self._namespace.clear()
        self._hooks.clear()
        self._closed = True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_namespace(self) -> dict[str, Any]:
        """Build the restricted globals the script executes in."""
        allowed = set(self.allowed_modules)

        def _safe_import(
            name: str,
            globals: Any = None,
            locals: Any = None,
            fromlist: Any = (),
            level: int = 0,
        ) -> Any:
            root = name.split(".")[0]
            if level != 0 or root not in allowed:
                raise ImportError(f"Import of '{name}' is not allowed")
            return __import__(name, globals, locals, fromlist, level)

        safe_builtins = dict(_SAFE_BUILTINS)
        safe_builtins["__import__"] = _safe_import
        safe_builtins.update(self.bridge.builtins())

        namespace: dict[str, Any] = {
            "__builtins__": safe_builtins,
            "__name__": f"assetkit_ext_{self.extension_id}",
            "__file__": str(self.source_path),
        }
        namespace.update(self.bridge.globals())
        return namespace

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("ready" if self._executed else "new")
        return f"ScriptSandbox({self.extension_id!r}, {state})"
