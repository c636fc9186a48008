"""LangGraph node functions for the inventory agent workflow.

Nodes:
    agent_node — Calls the tool-bound chat model with the system prompt and
                 the full message history, through the backoff executor.
    route      — Conditional edge: ``tools`` while the last assistant message
                 requests tool calls, ``END`` otherwise.
"""

import logging
from typing import Any, Literal, Optional

from langchain_core.prompts import ChatPromptTemplate
from langgraph.graph import END

from inventory_agent.errors import classify_external_error
from inventory_agent.graph.state import AgentState
from inventory_agent.models.conversation import pending_tool_calls
from inventory_agent.prompts import build_agent_prompt
from inventory_agent.services.backoff import BackoffPolicy
from inventory_agent.utils.helpers import get_timestamp

logger = logging.getLogger(__name__)

AGENT_NODE = "agent"
TOOLS_NODE = "tools"


async def agent_node(
    state: AgentState,
    llm_with_tools: Any,
    backoff: BackoffPolicy,
    prompt: Optional[ChatPromptTemplate] = None,
) -> dict:
    """Invoke the chat model on the current transcript.

    Args:
        state: Current agent state containing the full message history.
        llm_with_tools: Chat model with the lookup tool bound via ``.bind_tools()``.
        backoff: Retry policy for rate-limited model calls.
        prompt: Prompt template, defaults to the inventory persona.

    Returns:
        Dict with ``{"messages": [AIMessage]}`` to be merged by the reducer.
    """
    prompt = prompt or build_agent_prompt()
    prompt_messages = await prompt.aformat_messages(
        time=get_timestamp(),
        messages=state["messages"],
    )

    async def _invoke():
        try:
            return await llm_with_tools.ainvoke(prompt_messages)
        except Exception as e:
            raise classify_external_error(e, service="chat model") from e

    response = await backoff.run(_invoke, description="chat model")
    logger.info(
        "agent_node: model replied with %d tool call(s)",
        len(pending_tool_calls(response)),
    )
    return {"messages": [response]}


def route(state: AgentState) -> Literal["tools", "__end__"]:
    """Decide whether to execute tools or finish the turn.

    Returns:
        ``"tools"`` — if the last message is an assistant message with tool calls.
        ``END``     — otherwise.
    """
    last_message = state["messages"][-1]
    if pending_tool_calls(last_message):
        return TOOLS_NODE
    return END
