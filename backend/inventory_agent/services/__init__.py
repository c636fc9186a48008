"""Services package.

Submodules are imported directly (``inventory_agent.services.agent_service``)
because the graph package depends on ``backoff`` and the agent service depends
on the graph.
"""
