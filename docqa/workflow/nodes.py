"""Workflow nodes: load -> estimate cost -> (gate) -> index -> answer.

Each node receives the state plus its injected collaborators and returns
a partial state update.
"""

import logging
from typing import Callable

from docqa.workflow.state import WorkflowState

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


def _notify(notify: Notify | None, message: str) -> None:
    logger.info(message)
    if notify is not None:
        notify(message)


def load_documents(state: WorkflowState, loader, notify: Notify | None = None) -> dict:
    """Load every supported document from the loader's directory."""
    _notify(notify, "Loading docs...")
    documents = loader.load()
    _notify(notify, f"Docs loaded. ({len(documents)} documents)")
    return {"documents": documents}


def estimate_cost(
    state: WorkflowState,
    estimator: Callable[[list], float],
    notify: Notify | None = None,
) -> dict:
    """Estimate the embedding cost of the loaded documents."""
    _notify(notify, "Calculating cost...")
    cost = estimator(state["documents"])
    _notify(notify, f"Cost calculated: {cost}")
    return {"cost": cost}


def is_within_budget(state: WorkflowState, cost_ceiling: float) -> bool:
    return state["cost"] <= cost_ceiling


def skip_embedding(
    state: WorkflowState,
    cost_ceiling: float,
    notify: Notify | None = None,
) -> dict:
    """End the run without touching the index or the LLM."""
    _notify(notify, f"The cost of embedding exceeds ${cost_ceiling:g}. Skipping embeddings.")
    return {"skipped": True, "index_action": None, "answer": None}


def prepare_index(
    state: WorkflowState,
    index_fn: Callable,
    notify: Notify | None = None,
) -> dict:
    """Load the persisted index or build a new one.

    index_fn should accept the document list and return (store, action).
    """
    _notify(notify, "Checking for existing vector store...")
    store, action = index_fn(state["documents"])
    if action == "loaded":
        _notify(notify, "Vector store loaded.")
    else:
        _notify(notify, "Vector store created.")
    return {"vector_store": store, "index_action": action, "skipped": False}


def answer_question(
    state: WorkflowState,
    chain_factory: Callable,
    question: str,
    notify: Notify | None = None,
) -> dict:
    """Run the retrieval chain against the fixed question."""
    _notify(notify, "Creating retrieval chain...")
    chain = chain_factory(state["vector_store"])
    _notify(notify, "Querying chain...")
    answer = chain.invoke(question)
    return {"answer": answer}
