from __future__ import annotations

import asyncio
import uuid
from logging import Logger

from zenai_engine.agents.orchestrator_system import OrchestratorSystem
from zenai_engine.helpers.system_builder import init_system
from zenai_engine.utils.exceptions import (
    AgentExecutionError,
    ModelTimeoutError,
    RoutingError,
    ZenAIError,
)

USER_ID = "console"


async def _system(log: Logger, orchestrator: OrchestratorSystem) -> None:
    conversation_id = uuid.uuid4().hex
    print("==============================================")
    print(" ZenAI Project Assistant")
    while True:
        print("==============================================")
        print("Ask about tasks, code, meetings or project health.")
        print("Type 'clear' to forget this conversation")
        print("Type 'exit' or 'quit' to exit.\n")
        print("==============================================")

        try:
            query = (await asyncio.to_thread(input, ">>> ")).strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting. Goodbye!")
            break

        if not query:
            print("no query entered")
            continue

        if query.lower() in {"exit", "quit", "q"}:
            print("Goodbye!")
            break
        elif query.lower() == "clear":
            await orchestrator.clear_context(USER_ID, conversation_id)
            conversation_id = uuid.uuid4().hex
            print("Conversation cleared")
            continue
        else:
            await _query_mode(orchestrator, query, conversation_id, log)
            continue


async def _query_mode(orchestrator: OrchestratorSystem, query: str, conversation_id: str, log: Logger) -> None:
    try:
        result = await orchestrator.handle_request(query, USER_ID, conversation_id)

        print("\n--- Answer ---")
        print(result["response"])
        print(f"(agents: {', '.join(result['routing']['agents'])}, workflow: {result['routing']['workflow']})")
        if result["metadata"]["skipped_agents"]:
            print(f"(skipped: {', '.join(result['metadata']['skipped_agents'])})")
        print("--------------")

    except RoutingError as e:
        log.error(f"Routing failed: {e}", exc_info=True)
        print(f"Error: Could not decide which agent should answer: {e}")
    except AgentExecutionError as e:
        log.error(f"Agent error while handling query: {e}", exc_info=True)
        print(f"Error: {e.agent_name} failed to answer the query: {e}")
    except ModelTimeoutError as e:
        log.error(f"Query timed out: {e}", exc_info=True)
        print(f"Error: The request timed out: {e}")
    except ZenAIError as e:
        log.error(f"Error while handling query: {e}", exc_info=True)
        print(f"Error: {e}")
    except Exception as e:
        log.error(f"Unexpected error while handling query: {e}", exc_info=True)
        print(f"Unexpected error while handling query: {e}")


async def _main() -> None:
    log, orchestrator = await init_system()
    try:
        await _system(log, orchestrator)
    finally:
        await orchestrator.context_builder.conversation_store.cache.close()


def main() -> None:
    asyncio.run(_main())


if __name__ == "__main__":
    main()
