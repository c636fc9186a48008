"""Tests for the agent graph: routing, model invocation and loop wiring."""

from __future__ import annotations

import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from langgraph.graph import END

from inventory_agent.errors import AuthFailureError, ExhaustedRetriesError, RateLimitedError
from inventory_agent.graph.builder import build_inventory_graph
from inventory_agent.graph.nodes import agent_node, route
from inventory_agent.models.conversation import MessageRole, message_role, message_text
from inventory_agent.tools.item_lookup_tool import create_item_lookup_tool
from tests.conftest import FakeInventoryStore, ScriptedChatModel


def _tool_call_message(query: str = "desk", call_id: str = "call_1") -> AIMessage:
    return AIMessage(
        content="",
        tool_calls=[{"name": "item_lookup", "args": {"query": query}, "id": call_id}],
    )


# ── Message tagging ──────────────────────────────────────────────────


class TestMessageRole:
    def test_roles(self):
        assert message_role(HumanMessage(content="hi")) is MessageRole.USER
        assert message_role(AIMessage(content="hello")) is MessageRole.ASSISTANT
        assert message_role(ToolMessage(content="{}", tool_call_id="c1")) is MessageRole.TOOL

    def test_system_messages_are_not_transcript_messages(self):
        with pytest.raises(ValueError):
            message_role(SystemMessage(content="persona"))

    def test_message_text_joins_text_blocks(self):
        message = AIMessage(content=[{"type": "text", "text": "Two "}, {"type": "text", "text": "desks"}])
        assert message_text(message) == "Two desks"


# ── route ────────────────────────────────────────────────────────────


class TestRoute:
    def test_tool_calls_route_to_tools(self):
        state = {"messages": [HumanMessage(content="desk"), _tool_call_message()]}
        assert route(state) == "tools"

    def test_plain_assistant_reply_ends(self):
        state = {"messages": [HumanMessage(content="hi"), AIMessage(content="Hello!")]}
        assert route(state) == END

    def test_tool_result_does_not_route_to_tools(self):
        state = {
            "messages": [
                HumanMessage(content="desk"),
                _tool_call_message(),
                ToolMessage(content="{}", tool_call_id="call_1"),
            ]
        }
        assert route(state) == END


# ── agent_node ───────────────────────────────────────────────────────


class TestAgentNode:
    @pytest.mark.asyncio
    async def test_prompt_has_persona_then_history(self, no_sleep_backoff):
        llm = ScriptedChatModel([AIMessage(content="Hi there")])
        history = [HumanMessage(content="Do you sell sofas?")]

        result = await agent_node({"messages": history}, llm_with_tools=llm, backoff=no_sleep_backoff)

        assert result["messages"][0].content == "Hi there"
        prompt = llm.prompts[0]
        assert isinstance(prompt[0], SystemMessage)
        assert "item_lookup" in prompt[0].content
        assert "Current time:" in prompt[0].content
        assert "{time}" not in prompt[0].content
        assert prompt[1:] == history

    @pytest.mark.asyncio
    async def test_rate_limited_call_is_retried(self, no_sleep_backoff):
        llm = ScriptedChatModel([RateLimitedError("slow down"), AIMessage(content="ok")])

        result = await agent_node(
            {"messages": [HumanMessage(content="hi")]}, llm_with_tools=llm, backoff=no_sleep_backoff
        )

        assert result["messages"][0].content == "ok"
        assert len(llm.prompts) == 2

    @pytest.mark.asyncio
    async def test_persistent_rate_limit_exhausts(self, no_sleep_backoff):
        llm = ScriptedChatModel([RateLimitedError("slow down") for _ in range(3)])

        with pytest.raises(ExhaustedRetriesError):
            await agent_node({"messages": [HumanMessage(content="hi")]}, llm_with_tools=llm, backoff=no_sleep_backoff)

        assert len(llm.prompts) == 3

    @pytest.mark.asyncio
    async def test_raw_client_errors_are_classified(self, no_sleep_backoff):
        from ollama import ResponseError

        llm = ScriptedChatModel([ResponseError("unauthorized", 401)])

        with pytest.raises(AuthFailureError):
            await agent_node({"messages": [HumanMessage(content="hi")]}, llm_with_tools=llm, backoff=no_sleep_backoff)

        assert len(llm.prompts) == 1


# ── Compiled graph ───────────────────────────────────────────────────


class TestInventoryGraph:
    @pytest.mark.asyncio
    async def test_tool_round_trip_then_end(self, no_sleep_backoff, fake_embed, desk_items):
        store = FakeInventoryStore(items=desk_items, vector_matches=[(desk_items[0], 0.9)])
        tools = [create_item_lookup_tool(store, fake_embed)]
        llm = ScriptedChatModel([_tool_call_message("desk"), AIMessage(content="We have an Oak Writing Desk.")])
        graph = build_inventory_graph(llm.bind_tools(tools), tools, no_sleep_backoff)

        final = await graph.ainvoke({"messages": [HumanMessage(content="desk")]})

        roles = [message_role(m) for m in final["messages"]]
        assert roles == [MessageRole.USER, MessageRole.ASSISTANT, MessageRole.TOOL, MessageRole.ASSISTANT]
        tool_message = final["messages"][2]
        assert tool_message.tool_call_id == "call_1"
        assert '"searchType": "vector"' in tool_message.content
        # Second model call sees the tool result in its history
        assert isinstance(llm.prompts[1][-1], ToolMessage)

    @pytest.mark.asyncio
    async def test_no_tool_calls_ends_after_one_agent_step(self, no_sleep_backoff, fake_embed):
        store = FakeInventoryStore()
        tools = [create_item_lookup_tool(store, fake_embed)]
        llm = ScriptedChatModel([AIMessage(content="Hello!")])
        graph = build_inventory_graph(llm.bind_tools(tools), tools, no_sleep_backoff)

        final = await graph.ainvoke({"messages": [HumanMessage(content="hi")]})

        assert len(final["messages"]) == 2
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_every_tool_call_gets_a_result(self, no_sleep_backoff, fake_embed, desk_items):
        store = FakeInventoryStore(items=desk_items, vector_matches=[(desk_items[0], 0.9)])
        tools = [create_item_lookup_tool(store, fake_embed)]
        two_calls = AIMessage(
            content="",
            tool_calls=[
                {"name": "item_lookup", "args": {"query": "desk"}, "id": "call_a"},
                {"name": "item_lookup", "args": {"query": "chair", "n": 3}, "id": "call_b"},
            ],
        )
        llm = ScriptedChatModel([two_calls, AIMessage(content="done")])
        graph = build_inventory_graph(llm.bind_tools(tools), tools, no_sleep_backoff)

        final = await graph.ainvoke({"messages": [HumanMessage(content="desk and chair")]})

        tool_results = [m for m in final["messages"] if isinstance(m, ToolMessage)]
        assert sorted(m.tool_call_id for m in tool_results) == ["call_a", "call_b"]
        assert final["messages"][-1].content == "done"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("n", [0, 60])
    async def test_out_of_range_n_yields_lookup_payload(self, no_sleep_backoff, fake_embed, desk_items, n):
        store = FakeInventoryStore(items=desk_items, vector_matches=[(desk_items[0], 0.9)])
        tools = [create_item_lookup_tool(store, fake_embed)]
        call = AIMessage(
            content="",
            tool_calls=[{"name": "item_lookup", "args": {"query": "desk", "n": n}, "id": "call_n"}],
        )
        llm = ScriptedChatModel([call, AIMessage(content="One desk.")])
        graph = build_inventory_graph(llm.bind_tools(tools), tools, no_sleep_backoff)

        final = await graph.ainvoke({"messages": [HumanMessage(content="desk")]})

        tool_message = next(m for m in final["messages"] if isinstance(m, ToolMessage))
        payload = json.loads(tool_message.content)
        assert payload["searchType"] == "vector"
        assert payload["count"] == 1
        assert store.calls_to("similarity_search")[0][1] in (1, 50)
