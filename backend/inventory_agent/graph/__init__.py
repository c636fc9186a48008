"""LangGraph workflow package.

Exports:
    AgentState            — TypedDict state for the LangGraph workflow
    build_inventory_graph — Compile the StateGraph from an LLM + tools
    agent_node            — Model invocation node
    route                 — Conditional edge function
"""

from inventory_agent.graph.builder import build_inventory_graph
from inventory_agent.graph.nodes import AGENT_NODE, TOOLS_NODE, agent_node, route
from inventory_agent.graph.state import AgentState

__all__ = [
    "AgentState",
    "AGENT_NODE",
    "TOOLS_NODE",
    "build_inventory_graph",
    "agent_node",
    "route",
]
