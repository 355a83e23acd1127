"""
Agent tools.

A tool is a named action an agent may invoke with structured input; it
returns text. Tools are external collaborators (issue trackers, chat,
transcription) supplied by the application when agents are wired; an agent
can only use tools declared in its AgentConfig.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Union

from zenai_engine.utils.exceptions import ToolError, ZenAIError
from zenai_engine.utils.logger import logger

ToolHandler = Callable[[Mapping[str, Any]], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class AgentTool:
    """A named, described action. read_only marks tools without side effects."""

    name: str
    description: str
    handler: ToolHandler
    read_only: bool = True

    async def invoke(self, payload: Mapping[str, Any]) -> str:
        """
        Run the handler (sync or async) and return its result as text.

        Raises:
            ToolError: If the handler fails
        """
        logger.info(f"[AgentTool] Invoking tool '{self.name}'")
        try:
            result = self.handler(payload)
            if inspect.isawaitable(result):
                result = await result
        except ZenAIError:
            raise
        except Exception as e:
            raise ToolError(f"Tool '{self.name}' failed: {e}", details=f"tool={self.name}") from e
        return "" if result is None else str(result)
