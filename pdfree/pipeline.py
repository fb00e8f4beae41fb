"""Plugin registry and base class for PDFree tools."""

from __future__ import annotations

from typing import Any, Dict, Iterable

from .context import ProcessingContext


class BaseTool:
    """Base class for all pluggable PDFree tools."""

    name: str

    def __init__(self, context: ProcessingContext) -> None:
        self.context = context

    def option(self, key: str, default: Any = None) -> Any:
        return self.context.config.get(key, default)

    def require(self, key: str) -> Any:
        value = self.context.config.get(key)
        if value is None:
            raise ValueError(f"Tool '{self.name}' requires '{key}'")
        return value

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


class ToolRegistry:
    """Registry storing available PDFree tools."""

    def __init__(self) -> None:
        self._tools: Dict[str, type[BaseTool]] = {}

    def register(self, name: str, tool_class: type[BaseTool]) -> None:
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = tool_class

    def create(self, name: str, context: ProcessingContext) -> BaseTool:
        try:
            tool_class = self._tools[name]
        except KeyError as exc:
            raise KeyError(f"Tool '{name}' is not registered") from exc
        return tool_class(context)

    def names(self) -> Iterable[str]:
        return sorted(self._tools.keys())


registry = ToolRegistry()


def register_tool(name: str):
    def decorator(cls: type[BaseTool]) -> type[BaseTool]:
        registry.register(name, cls)
        return cls

    return decorator


__all__ = ["BaseTool", "ToolRegistry", "register_tool", "registry"]
