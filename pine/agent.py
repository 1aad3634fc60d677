"""Conversation agent for pine"""

import logging
from collections.abc import Callable
from typing import Any

from anthropic import Anthropic

from .config import PineConfig, load_system_prompt
from .session import Session
from .shell import BASH_SHELL_TOOL, BashShell

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 4096

CHANGE_DIRECTORY_TOOL = {
    "name": "changeDirectory",
    "description": (
        "Change the session's working directory. Later shell commands run in "
        "the new directory. Relative paths resolve against the current one."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Directory to change to"},
        },
        "required": ["path"],
    },
}

AVAILABLE_TOOLS = {
    "bashShell": BASH_SHELL_TOOL,
    "changeDirectory": CHANGE_DIRECTORY_TOOL,
}


class ToolFactory:
    """Build API tool definitions for the enabled tool names"""

    def create_tools(self, enabled_tools: list[str]) -> list[dict]:
        tools = []
        for name in enabled_tools:
            definition = AVAILABLE_TOOLS.get(name)
            if definition is None:
                logger.warning("Ignoring unknown tool '%s' in enabled_tools", name)
                continue
            tools.append(definition)
        return tools


def _block_to_dict(block: Any) -> dict:
    if isinstance(block, dict):
        return block
    return block.model_dump(exclude_none=True)


class PineAgent:
    """Send messages to Claude and run the tools it asks for"""

    def __init__(self, config: PineConfig, client: Any = None, tool_factory: ToolFactory | None = None):
        self.config = config
        self.anthropic = client if client is not None else Anthropic(api_key=config.anthropic_api_key)
        self.tools = (tool_factory or ToolFactory()).create_tools(config.enabled_tools)
        self.shell = BashShell(timeout=config.shell_timeout)
        self.system_prompt = load_system_prompt()

    def _build_system_prompt(self, working_directory: str) -> str:
        parts = []
        if self.system_prompt:
            parts.append(self.system_prompt.strip())
        parts.append(f"Current working directory: {working_directory}")
        return "\n\n".join(parts)

    def _request_kwargs(self) -> dict[str, Any]:
        params = self.config.model_parameters
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": params.max_tokens or DEFAULT_MAX_TOKENS,
        }
        if params.temperature is not None:
            kwargs["temperature"] = params.temperature
        if self.tools:
            kwargs["tools"] = self.tools
        return kwargs

    def execute_tool(self, session: Session, tool_name: str, arguments: dict) -> tuple[str, bool]:
        """Run one tool call against the session

        Returns:
            Tuple of (result text, is_error)
        """
        if tool_name == "bashShell":
            directory = session.current_directory(self.config.working_directory)
            result = self.shell.run(arguments.get("command") or "", directory, arguments.get("arguments"))
            return result.to_text(), result.is_error

        if tool_name == "changeDirectory":
            outcome = session.change_directory(arguments.get("path") or "", self.config.working_directory)
            if not outcome.accepted:
                return f"Error: {outcome.reason}", True
            return f"Changed directory to: {outcome.directory}", False

        return f"Error: Unknown tool '{tool_name}'", True

    async def send_message(
        self,
        session: Session,
        text: str,
        max_turns: int = 25,
        on_tool_call: Callable[[str, dict], None] | None = None,
    ) -> str:
        """Send a user message and return the assistant's final text

        The session transcript is updated after every model turn, so
        directory changes requested by the model land at the right position.

        Args:
            session: Session whose transcript and working directory are used
            text: User message
            max_turns: Safety limit on model round trips
            on_tool_call: Optional callback invoked with (tool name, input)

        Returns:
            The assistant's response text
        """
        messages = list(session.transcript)
        messages.append({"role": "user", "content": text})
        session.set_transcript(messages)

        for _turn in range(max_turns):
            working_directory = session.current_directory(self.config.working_directory)
            response = self.anthropic.messages.create(
                system=self._build_system_prompt(working_directory),
                messages=messages,
                **self._request_kwargs(),
            )

            content = [_block_to_dict(block) for block in response.content]
            messages.append({"role": "assistant", "content": content})
            session.set_transcript(messages)

            tool_results: list[dict[str, Any]] = []
            for block in content:
                if block.get("type") != "tool_use":
                    continue
                if on_tool_call:
                    on_tool_call(block["name"], block.get("input", {}))

                result, is_error = self.execute_tool(session, block["name"], block.get("input", {}))
                tool_result: dict[str, Any] = {
                    "type": "tool_result",
                    "tool_use_id": block["id"],
                    "content": result,
                }
                if is_error:
                    tool_result["is_error"] = True
                tool_results.append(tool_result)

            if not tool_results:
                return "".join(block.get("text", "") for block in content if block.get("type") == "text")

            messages.append({"role": "user", "content": tool_results})
            session.set_transcript(messages)

        logger.warning("Maximum turns (%d) reached for session %s", max_turns, session.id)
        return "Maximum turns reached without final answer"
