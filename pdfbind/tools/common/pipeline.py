"""Name-to-tool registry behind the CLI and the package-level helpers."""

from __future__ import annotations

from .interfaces import BaseTool, ConversionContext


class ToolRegistry:
    """Maps sub-command names such as ``strip-blanks`` to tool classes."""

    def __init__(self) -> None:
        self._tools: dict[str, type[BaseTool]] = {}

    def register(self, name: str, tool_class: type[BaseTool]) -> None:
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = tool_class

    def create(self, name: str, context: ConversionContext) -> BaseTool:
        """Instantiate the tool registered as *name* for one run."""

        try:
            tool_class = self._tools[name]
        except KeyError as exc:
            raise KeyError(f"Tool '{name}' is not registered (known: {', '.join(self.names())})") from exc
        return tool_class(context)

    def names(self) -> list[str]:
        return sorted(self._tools)


registry = ToolRegistry()


def register_tool(name: str):
    """Class decorator adding a :class:`BaseTool` subclass to :data:`registry`."""

    def decorator(cls: type[BaseTool]) -> type[BaseTool]:
        registry.register(name, cls)
        return cls

    return decorator


__all__ = ["ToolRegistry", "register_tool", "registry"]
