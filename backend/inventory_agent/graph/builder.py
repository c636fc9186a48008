"""LangGraph StateGraph builder for the inventory agent.

Wires START -> agent -> (route?) -> tools -> agent ... -> END.

The graph is compiled without a checkpointer: the agent service owns
persistence so it can roll a thread back when a turn fails.
"""

import logging
from functools import partial
from typing import Any

from langchain_core.tools import BaseTool
from langgraph.graph import END, START, StateGraph
from langgraph.prebuilt import ToolNode

from inventory_agent.graph.nodes import AGENT_NODE, TOOLS_NODE, agent_node, route
from inventory_agent.graph.state import AgentState
from inventory_agent.services.backoff import BackoffPolicy

logger = logging.getLogger(__name__)


def build_inventory_graph(
    llm_with_tools: Any,
    tools: list[BaseTool],
    backoff: BackoffPolicy,
):
    """Build and compile the StateGraph for the inventory workflow.

    Args:
        llm_with_tools: Chat model already bound to ``tools`` via ``.bind_tools(tools)``.
        tools: Tools executed by the ``tools`` node.
        backoff: Retry policy applied to every model call.

    Returns:
        A compiled graph ready for ``.ainvoke()`` / ``.astream()``.
    """
    workflow = StateGraph(AgentState)

    # Bind dependencies via functools.partial so each node is a plain callable
    bound_agent = partial(agent_node, llm_with_tools=llm_with_tools, backoff=backoff)

    workflow.add_node(AGENT_NODE, bound_agent)
    workflow.add_node(TOOLS_NODE, ToolNode(tools))

    workflow.add_edge(START, AGENT_NODE)
    workflow.add_conditional_edges(
        AGENT_NODE,
        route,
        {
            TOOLS_NODE: TOOLS_NODE,
            END: END,
        },
    )
    workflow.add_edge(TOOLS_NODE, AGENT_NODE)  # Loop back after tool execution

    compiled = workflow.compile()
    logger.info(
        "Inventory workflow compiled with %d tool(s): %s",
        len(tools),
        [t.name for t in tools],
    )
    return compiled
