"""Tests for the OrchestratorSystem."""

import asyncio

import pytest

from tests.conftest import FakeDocumentStore, ScriptedModelClient, StubAgent, routing_reply
from tests.test_orchestrator.data import (
    CR,
    EXECUTION_CASES,
    PM,
    SUCCESS_STATES,
    TA,
    WORKFLOW_BREAKDOWN,
)
from zenai_engine.agents.orchestrator_system import OrchestratorSystem
from zenai_engine.agents.registry import AgentRegistry
from zenai_engine.agents.router_agent import RouterAgent
from zenai_engine.config.constants import AgentType, MessageRole
from zenai_engine.memory.context_builder import ContextBuilder, ContextBundle
from zenai_engine.utils.exceptions import (
    AgentExecutionError,
    ConfigurationError,
    ModelTimeoutError,
    ProviderError,
    RetrievalError,
    RoutingError,
    SchemaViolation,
    SynthesisError,
    UnparsableResponse,
)


def _orchestrator(registry, router_replies, synthesis_replies, context_builder=None):
    router_client = ScriptedModelClient(router_replies)
    synthesis_client = ScriptedModelClient(synthesis_replies)
    orchestrator = OrchestratorSystem(
        synthesis_client,
        registry,
        context_builder=context_builder,
        router=RouterAgent(router_client, available_agents=registry.available()),
    )
    return orchestrator, router_client, synthesis_client


# ----------------------------------------------------------------------------
# execute()
# ----------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("name, agents, workflow, expected_keys", EXECUTION_CASES, ids=[c[0] for c in EXECUTION_CASES])
async def test_execute_routes_runs_and_synthesizes(registry, name, agents, workflow, expected_keys):
    orchestrator, router_client, synthesis_client = _orchestrator(
        registry, [routing_reply(agents, workflow)], ["final answer"]
    )

    result = await orchestrator.execute("Plan and estimate the billing epic")

    assert result.synthesis == "final answer"
    assert list(result.agent_results) == expected_keys
    assert result.agent_results == {key: f"{key} result" for key in expected_keys}
    assert result.metadata["states"] == SUCCESS_STATES
    assert result.metadata["skipped_agents"] == []
    assert len(router_client.calls) == 1
    assert len(synthesis_client.calls) == 1


@pytest.mark.asyncio
async def test_synthesis_sees_every_agent_result(registry):
    orchestrator, _, synthesis_client = _orchestrator(registry, [routing_reply([PM, CR], "parallel")], ["merged"])

    await orchestrator.execute("Review and plan")

    [messages] = synthesis_client.calls
    assert messages[0]["role"] is MessageRole.SYSTEM
    prompt = messages[1]["content"]
    assert "Review and plan" in prompt
    assert f"{PM} result" in prompt
    assert f"{CR} result" in prompt


@pytest.mark.asyncio
async def test_unknown_agents_are_skipped_and_reported(registry, stub_agents):
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA, "weatherBot"])], ["done"])

    result = await orchestrator.execute("Estimate this")

    assert list(result.agent_results) == [TA]
    assert result.metadata["skipped_agents"] == ["weatherBot"]
    assert result.routing.skipped_agents == ("weatherBot",)
    assert len(stub_agents[AgentType.TASK_ANALYZER].calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply, error",
    [
        (routing_reply(["weatherBot"]), RoutingError),
        (routing_reply([TA], "round-robin"), SchemaViolation),
        ("no idea", UnparsableResponse),
    ],
    ids=["all unknown", "invalid workflow", "unparsable"],
)
async def test_routing_failures_stop_before_any_agent_runs(registry, stub_agents, reply, error):
    orchestrator, _, synthesis_client = _orchestrator(registry, [reply], [])

    with pytest.raises(error):
        await orchestrator.execute("Do something")

    assert all(agent.calls == [] for agent in stub_agents.values())
    assert synthesis_client.calls == []


@pytest.mark.asyncio
async def test_sequential_agents_receive_earlier_results(registry, stub_agents):
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([PM, TA, CR])], ["done"])

    await orchestrator.execute("Plan, estimate and review")

    assert stub_agents[AgentType.PRODUCT_MANAGER].calls[0]["previous_results"] == {}
    assert stub_agents[AgentType.TASK_ANALYZER].calls[0]["previous_results"] == {PM: f"{PM} result"}
    assert stub_agents[AgentType.CODE_REVIEWER].calls[0]["previous_results"] == {
        PM: f"{PM} result",
        TA: f"{TA} result",
    }


@pytest.mark.asyncio
async def test_parallel_agents_never_see_each_other(registry, stub_agents):
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([PM, TA], "parallel")], ["done"])
    context = ContextBundle.empty("q", {"project": "Apollo"})

    await orchestrator.execute("Plan and estimate", context)

    for agent_type in (AgentType.PRODUCT_MANAGER, AgentType.TASK_ANALYZER):
        [call] = stub_agents[agent_type].calls
        assert call["previous_results"] is None
        assert call["context"] is context


@pytest.mark.asyncio
async def test_parallel_results_merge_in_request_order():
    slow = StubAgent(AgentType.CODE_REVIEWER, output="slow", delay=0.05)
    fast = StubAgent(AgentType.TASK_ANALYZER, output="fast")
    registry = AgentRegistry({AgentType.CODE_REVIEWER: slow, AgentType.TASK_ANALYZER: fast})
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([CR, TA], "parallel")], ["done"])

    result = await orchestrator.execute("Review and estimate")

    assert list(result.agent_results.items()) == [(CR, "slow"), (TA, "fast")]


@pytest.mark.asyncio
async def test_parallel_failure_is_fail_fast():
    error = ProviderError("upstream 503", provider="openai")
    failing = StubAgent(AgentType.CODE_REVIEWER, output=error)
    slow = StubAgent(AgentType.TASK_ANALYZER, output="never used", delay=5)
    registry = AgentRegistry({AgentType.CODE_REVIEWER: failing, AgentType.TASK_ANALYZER: slow})
    orchestrator, _, synthesis_client = _orchestrator(registry, [routing_reply([TA, CR], "parallel")], [])

    with pytest.raises(ProviderError) as exc_info:
        await asyncio.wait_for(orchestrator.execute("Review and estimate"), timeout=2)

    assert exc_info.value is error
    assert slow.cancelled
    assert synthesis_client.calls == []


@pytest.mark.asyncio
async def test_sequential_failure_carries_partial_results():
    error = ProviderError("rate limited")
    registry = AgentRegistry(
        {
            AgentType.PRODUCT_MANAGER: StubAgent(AgentType.PRODUCT_MANAGER, output="plan"),
            AgentType.TASK_ANALYZER: StubAgent(AgentType.TASK_ANALYZER, output=error),
            AgentType.CODE_REVIEWER: StubAgent(AgentType.CODE_REVIEWER, output="review"),
        }
    )
    orchestrator, _, synthesis_client = _orchestrator(registry, [routing_reply([PM, TA, CR])], [])

    with pytest.raises(AgentExecutionError) as exc_info:
        await orchestrator.execute("Plan, estimate, review")

    assert exc_info.value.agent_name == TA
    assert exc_info.value.partial_results == {PM: "plan"}
    assert exc_info.value.__cause__ is error
    assert registry.get(AgentType.CODE_REVIEWER).calls == []
    assert synthesis_client.calls == []


@pytest.mark.asyncio
async def test_synthesis_failures(registry):
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA])], [ProviderError("down")])
    with pytest.raises(SynthesisError) as exc_info:
        await orchestrator.execute("Estimate")
    assert isinstance(exc_info.value.__cause__, ProviderError)

    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA])], [ModelTimeoutError(5)])
    with pytest.raises(ModelTimeoutError):
        await orchestrator.execute("Estimate")


@pytest.mark.asyncio
async def test_execute_rejects_empty_request(registry):
    orchestrator, router_client, _ = _orchestrator(registry, [], [])
    with pytest.raises(ValueError):
        await orchestrator.execute("   ")
    assert router_client.calls == []


@pytest.mark.asyncio
async def test_initialize_readies_router_and_agents(registry):
    orchestrator, router_client, synthesis_client = _orchestrator(registry, [], [])
    assert not orchestrator.is_ready

    await orchestrator.initialize()

    assert orchestrator.is_ready
    assert router_client.is_ready
    assert synthesis_client.is_ready


# ----------------------------------------------------------------------------
# handle_request()
# ----------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_handle_request_saves_the_interaction_once(registry, context_builder, conversation_store):
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA, "weatherBot"])], ["It takes 3 days"], context_builder)

    response = await orchestrator.handle_request("How long?", "u1", "c1", context={"project": "Apollo"})

    assert response["response"] == "It takes 3 days"
    assert response["routing"]["agents"] == [TA]
    assert response["agent_results"] == {TA: f"{TA} result"}
    assert response["metadata"]["user_id"] == "u1"
    assert response["metadata"]["conversation_id"] == "c1"
    assert response["metadata"]["skipped_agents"] == ["weatherBot"]
    assert response["metadata"]["states"] == SUCCESS_STATES
    assert "timestamp" in response["metadata"]

    history = await conversation_store.memory("u1", "c1").history()
    assert [(m.role, m.content) for m in history] == [
        (MessageRole.USER, "How long?"),
        (MessageRole.ASSISTANT, "It takes 3 days"),
    ]


@pytest.mark.asyncio
async def test_handle_request_passes_built_context_to_agents(registry, stub_agents, context_builder, conversation_store):
    await conversation_store.memory("u1", "c1").extend([("user", "earlier", None), ("assistant", "reply", None)])
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA])], ["ok"], context_builder)

    await orchestrator.handle_request("Next question", "u1", "c1", context={"project": "Apollo"})

    context = stub_agents[AgentType.TASK_ANALYZER].calls[0]["context"]
    assert [m.content for m in context.conversation_history] == ["earlier", "reply"]
    assert [d.id for d in context.relevant_documents] == ["d1", "d2"]
    assert context.metadata == {"project": "Apollo"}


@pytest.mark.asyncio
async def test_failed_request_writes_nothing(context_builder, conversation_store):
    registry = AgentRegistry({AgentType.TASK_ANALYZER: StubAgent(AgentType.TASK_ANALYZER, output=ProviderError("down"))})
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA])], [], context_builder)

    with pytest.raises(AgentExecutionError):
        await orchestrator.handle_request("How long?", "u1", "c1")

    assert await conversation_store.memory("u1", "c1").history() == []


@pytest.mark.asyncio
async def test_failed_indexing_fails_the_request_without_saving(registry, conversation_store):
    builder = ContextBuilder(conversation_store, FakeDocumentStore(add_error=RetrievalError("index down")))
    orchestrator, _, _ = _orchestrator(registry, [routing_reply([TA])], ["It takes 3 days"], builder)

    with pytest.raises(RetrievalError):
        await orchestrator.handle_request("How long?", "u1", "c1", index_for_retrieval=True)

    assert await conversation_store.memory("u1", "c1").history() == []


@pytest.mark.asyncio
async def test_timeout_cancels_and_writes_nothing(context_builder, conversation_store):
    slow = StubAgent(AgentType.TASK_ANALYZER, output="late", delay=5)
    orchestrator, _, synthesis_client = _orchestrator(
        AgentRegistry({AgentType.TASK_ANALYZER: slow}), [routing_reply([TA])], ["never"], context_builder
    )

    with pytest.raises(ModelTimeoutError) as exc_info:
        await orchestrator.handle_request("How long?", "u1", "c1", timeout=0.05)

    assert isinstance(exc_info.value, TimeoutError)
    assert slow.cancelled
    assert synthesis_client.calls == []
    assert await conversation_store.memory("u1", "c1").history() == []


@pytest.mark.asyncio
async def test_concurrent_requests_on_separate_conversations(registry, context_builder, conversation_store):
    orchestrator, _, _ = _orchestrator(
        registry,
        lambda prompt: routing_reply([TA]),
        lambda prompt: "answer",
        context_builder,
    )

    await asyncio.gather(
        *(orchestrator.handle_request(f"question {i}", "u1", f"c{i}") for i in range(5))
    )

    for i in range(5):
        history = await conversation_store.memory("u1", f"c{i}").history()
        assert [m.content for m in history] == [f"question {i}", "answer"]


@pytest.mark.asyncio
async def test_handle_request_needs_a_context_builder(registry):
    orchestrator, _, _ = _orchestrator(registry, [], [])
    with pytest.raises(ConfigurationError):
        await orchestrator.handle_request("How long?", "u1", "c1")
    with pytest.raises(ConfigurationError):
        await orchestrator.clear_context("u1", "c1")


@pytest.mark.asyncio
async def test_clear_context(registry, context_builder, conversation_store):
    await conversation_store.memory("u1", "c1").append("user", "hello")
    orchestrator, _, _ = _orchestrator(registry, [], [], context_builder)

    await orchestrator.clear_context("u1", "c1")

    assert await conversation_store.memory("u1", "c1").history() == []


# ----------------------------------------------------------------------------
# handle_complex_workflow()
# ----------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_complex_workflow_runs_steps_in_order(registry, stub_agents):
    orchestrator, router_client, synthesis_client = _orchestrator(
        registry,
        [routing_reply([PM]), routing_reply([TA])],
        [WORKFLOW_BREAKDOWN, "step one done", "step two done", "workflow summary"],
    )

    result = await orchestrator.handle_complex_workflow("Plan and estimate the billing epic")

    assert [step["order"] for step in result["workflow"]] == [1, 2]
    assert [r["action"] for r in result["results"]] == [
        "Break the billing epic into subtasks",
        "Estimate the subtasks",
    ]
    assert result["results"][0]["result"]["synthesis"] == "step one done"
    assert result["summary"] == "workflow summary"
    assert len(router_client.calls) == 2
    assert len(synthesis_client.calls) == 4

    second_context = stub_agents[AgentType.TASK_ANALYZER].calls[0]["context"]
    assert second_context.metadata["step"] == 2
    assert second_context.metadata["previous_steps"] == [
        {"step": 1, "action": "Break the billing epic into subtasks", "response": "step one done"}
    ]
    assert "step two done" in synthesis_client.prompts[-1]


@pytest.mark.asyncio
async def test_complex_workflow_needs_steps(registry):
    orchestrator, _, _ = _orchestrator(registry, [], ["[]"])
    with pytest.raises(RoutingError):
        await orchestrator.handle_complex_workflow("Do several things")


@pytest.mark.asyncio
async def test_breakdown_steps_need_an_action(registry):
    orchestrator, _, _ = _orchestrator(registry, [], ['[{"order": 1, "agent": "taskAnalyzer"}]'])
    with pytest.raises(SchemaViolation):
        await orchestrator.breakdown_workflow("Do several things")


@pytest.mark.asyncio
async def test_complex_workflow_does_not_touch_memory(registry, context_builder, conversation_store):
    orchestrator, _, _ = _orchestrator(
        registry,
        [routing_reply([PM]), routing_reply([TA])],
        [WORKFLOW_BREAKDOWN, "one", "two", "summary"],
        context_builder,
    )

    await orchestrator.handle_complex_workflow("Plan and estimate", user_id="u1", conversation_id="c1")

    assert await conversation_store.memory("u1", "c1").history() == []
