"""LangGraph workflow definition for the document Q&A run."""

from functools import partial
from typing import Callable

from langgraph.graph import END, StateGraph

from config.settings import MissingCredentialsError, Settings, missing_credentials
from docqa.ingestion.cost import estimate_cost as estimate_embedding_cost
from docqa.ingestion.loaders import DirectoryLoader
from docqa.qa.chain import RetrievalQAChain
from docqa.vectorstore.chroma_store import ChromaStore
from docqa.vectorstore.index_manager import load_or_build_index
from docqa.workflow.nodes import (
    Notify,
    answer_question,
    estimate_cost,
    is_within_budget,
    load_documents,
    prepare_index,
    skip_embedding,
)
from docqa.workflow.state import WorkflowState


def build_workflow(
    loader,
    estimator: Callable[[list], float],
    index_fn: Callable,
    chain_factory: Callable,
    question: str,
    cost_ceiling: float = 1.0,
    notify: Notify | None = None,
):
    """Build the workflow graph.

    Args:
        loader: Object with a load() -> list[SourceDocument] method.
        estimator: Callable (documents) -> cost.
        index_fn: Callable (documents) -> (store, action).
        chain_factory: Callable (store) -> object with invoke(question).
        question: The question asked when the cost is within budget.
        cost_ceiling: Runs costing more than this skip indexing and querying.

    Returns:
        A compiled LangGraph StateGraph.
    """
    graph = StateGraph(WorkflowState)

    graph.add_node("load_documents", partial(load_documents, loader=loader, notify=notify))
    graph.add_node("estimate_cost", partial(estimate_cost, estimator=estimator, notify=notify))
    graph.add_node(
        "skip_embedding",
        partial(skip_embedding, cost_ceiling=cost_ceiling, notify=notify),
    )
    graph.add_node("prepare_index", partial(prepare_index, index_fn=index_fn, notify=notify))
    graph.add_node(
        "answer_question",
        partial(answer_question, chain_factory=chain_factory, question=question, notify=notify),
    )

    def _route_after_cost(state: WorkflowState) -> str:
        if is_within_budget(state, cost_ceiling):
            return "prepare_index"
        return "skip_embedding"

    graph.set_entry_point("load_documents")
    graph.add_edge("load_documents", "estimate_cost")
    graph.add_conditional_edges(
        "estimate_cost",
        _route_after_cost,
        {"prepare_index": "prepare_index", "skip_embedding": "skip_embedding"},
    )
    graph.add_edge("skip_embedding", END)
    graph.add_edge("prepare_index", "answer_question")
    graph.add_edge("answer_question", END)

    return graph.compile()


def run_workflow(
    settings: Settings,
    notify: Notify | None = None,
    loader=None,
    encoding=None,
    embedding_provider=None,
    llm=None,
    store_factory=ChromaStore,
) -> WorkflowState:
    """Wire collaborators from settings and run the workflow once.

    The embedding provider and the LLM are only created once the cost
    check has passed; any of them may be passed in instead. Their API keys
    are checked at the same point, before any index work, so an over-budget
    run needs no credentials.

    Raises:
        MissingCredentialsError: A provider that is not passed in has no key.
    """
    if loader is None:
        loader = DirectoryLoader(settings.documents_path)

    providers = {"embedding": embedding_provider}

    def _embedding_provider():
        if providers["embedding"] is None:
            from docqa.embedding.config import get_embedding_provider

            providers["embedding"] = get_embedding_provider(settings)
        return providers["embedding"]

    def _estimator(documents):
        return estimate_embedding_cost(
            documents,
            rate_per_1k=settings.docqa_rate_per_1k_tokens,
            encoding=encoding,
            model_name=settings.docqa_tokenizer_model,
        )

    def _index_fn(documents):
        missing = missing_credentials(
            settings,
            embedding=embedding_provider is None,
            llm=llm is None,
        )
        if missing:
            raise MissingCredentialsError(missing)
        return load_or_build_index(
            documents,
            settings.index_path,
            _embedding_provider(),
            chunk_size=settings.docqa_chunk_size,
            chunk_overlap=settings.docqa_chunk_overlap,
            store_factory=store_factory,
            documents_path=settings.documents_path,
        )

    def _chain_factory(store):
        model = llm
        if model is None:
            from docqa.llm.config import get_llm

            model = get_llm(settings)
        return RetrievalQAChain.from_llm(
            model,
            store,
            _embedding_provider(),
            top_k=settings.docqa_top_k,
        )

    workflow = build_workflow(
        loader=loader,
        estimator=_estimator,
        index_fn=_index_fn,
        chain_factory=_chain_factory,
        question=settings.docqa_question,
        cost_ceiling=settings.docqa_cost_ceiling,
        notify=notify,
    )
    initial_state = {
        "documents": [],
        "skipped": False,
        "index_action": None,
        "answer": None,
    }
    return workflow.invoke(initial_state)
