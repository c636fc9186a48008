"""Message tagging for the conversation transcript.

The transcript is a list of LangChain messages. ``MessageRole`` is the tag the
state machine branches on, so routing never depends on attribute probing.
"""

from enum import Enum

from langchain_core.messages import AIMessage, BaseMessage, ToolCall


class MessageRole(str, Enum):
    """Roles that may appear in a persisted transcript."""

    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


_ROLE_BY_MESSAGE_TYPE = {
    "human": MessageRole.USER,
    "ai": MessageRole.ASSISTANT,
    "tool": MessageRole.TOOL,
}


def message_role(message: BaseMessage) -> MessageRole:
    """Return the transcript role of ``message``.

    Raises:
        ValueError: for message types that never enter a transcript (system,
            function, chat).
    """
    try:
        return _ROLE_BY_MESSAGE_TYPE[message.type]
    except KeyError:
        raise ValueError(f"Unsupported message type in transcript: {message.type}") from None


def pending_tool_calls(message: BaseMessage) -> list[ToolCall]:
    """Tool invocations requested by an assistant message, empty otherwise."""
    if message_role(message) is MessageRole.ASSISTANT and isinstance(message, AIMessage):
        return list(message.tool_calls)
    return []


def message_text(message: BaseMessage) -> str:
    """Plain text of a message whose content may be a list of blocks."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
