"""Custom callback bridge: resolves 'custom' rule references and runs them.

A custom rule's parameter is a callable or a two-part reference string such
as "Accounts.unique_username". Strings are resolved against an explicit
table, then against registered namespaces, then (optionally) against an
importable module of that name.

Callbacks take the field value and return either a bool or a
(bool, message) tuple. The message becomes the field's failure message.

Usage:
    from formrules import callback_registry

    @callback_registry.callback("Accounts.unique_username")
    def unique_username(value):
        if value in taken:
            return False, "That username is taken"
        return True
"""

import importlib
from typing import Any, Callable, Optional, Union

from formrules.config import Settings, get_settings

# A callback returns pass/fail, optionally with its own failure message
CallbackResult = Union[bool, tuple[bool, str]]
Callback = Callable[[Any], CallbackResult]


class CallbackRegistry:
    """Explicit table of custom rule callbacks."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._callbacks: dict[str, Callback] = {}
        self._namespaces: dict[str, Any] = {}

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    # ── Registration ──

    def add(self, ref: str, func: Callback) -> None:
        """Register func under a two-part reference."""
        if self.split(ref) is None:
            raise ValueError(
                f"Callback reference '{ref}' must look like 'Namespace{self.settings.CALLBACK_DELIMITER}method'"
            )
        if not self._is_callback(func):
            raise TypeError(f"Callback for '{ref}' is not a callable function or method")
        self._callbacks[ref] = func

    def callback(self, ref: str) -> Callable[[Callback], Callback]:
        """Decorator form of add()."""
        def decorator(func: Callback) -> Callback:
            self.add(ref, func)
            return func
        return decorator

    def register_namespace(self, name: str, target: Any) -> None:
        """Expose every callable attribute of target (class, instance, module) as name.<attr>."""
        self._namespaces[name] = target

    def remove(self, ref: str) -> None:
        self._callbacks.pop(ref, None)

    def clear(self) -> None:
        self._callbacks.clear()
        self._namespaces.clear()

    # ── Resolution ──

    def split(self, ref: str) -> Optional[tuple[str, str]]:
        """Split 'Namespace.method' into its two parts, or None if malformed."""
        if not isinstance(ref, str):
            return None
        parts = ref.split(self.settings.CALLBACK_DELIMITER)
        if len(parts) != 2 or not all(p.strip() for p in parts):
            return None
        return parts[0], parts[1]

    def resolve(self, ref: Any) -> Optional[Callback]:
        """Find the callable a reference points to, or None."""
        if not isinstance(ref, str):
            return ref if self._is_callback(ref) else None

        parts = self.split(ref)
        if parts is None:
            return None

        if ref in self._callbacks:
            return self._callbacks[ref]

        namespace, method = parts
        target = self._namespaces.get(namespace)
        if target is None and self.settings.ALLOW_MODULE_CALLBACKS:
            target = self._import_namespace(namespace)
        if target is None:
            return None

        try:
            func = getattr(target, method, None)
        except Exception:
            # Attribute access ran code that failed; treat as unresolved
            return None
        return func if self._is_callback(func) else None

    @staticmethod
    def _is_callback(obj: Any) -> bool:
        """Functions, bound methods and callable instances; classes are rejected."""
        return callable(obj) and not isinstance(obj, type)

    @staticmethod
    def _import_namespace(namespace: str) -> Optional[Any]:
        try:
            return importlib.import_module(namespace)
        except Exception:
            # Missing module, or one that fails while importing
            return None

    # ── Invocation ──

    def run(self, func: Callback, value: Any) -> tuple[bool, str]:
        """Invoke a resolved callback and normalize its result to (passed, message)."""
        result = func(value)
        if isinstance(result, tuple):
            passed, message = (result + ("",))[:2]
            return bool(passed), "" if message is None else str(message)
        return bool(result), ""


# Module-level singleton
callback_registry = CallbackRegistry()
