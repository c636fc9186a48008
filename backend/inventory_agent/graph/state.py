"""LangGraph agent state definition for the inventory workflow.

Uses TypedDict with Annotated[list, add_messages] so every node that returns
``{"messages": [...]}`` has those messages appended to the transcript.
"""

from typing import Annotated, TypedDict

from langchain_core.messages import AnyMessage
from langgraph.graph.message import add_messages


class AgentState(TypedDict):
    """Conversation state for one thread: the ordered transcript."""

    messages: Annotated[list[AnyMessage], add_messages]
