"""Integration test for the full run.

Uses a real persistent ChromaDB index in a temp directory, a deterministic
bag-of-letters embedding provider, a whitespace tokenizer and a mocked LLM,
so nothing leaves the machine.
"""

import math
from unittest.mock import MagicMock

import pytest

from config.settings import MissingCredentialsError, Settings
from docqa.embedding.provider import EmbeddingProvider
from docqa.vectorstore.chroma_store import ChromaStore
from docqa.workflow.graph import run_workflow


class LetterEmbeddingProvider(EmbeddingProvider):
    """Embeds text as normalized letter frequencies (27 dims)."""

    def __init__(self):
        self.embed_calls = 0

    def embed(self, texts):
        if not texts:
            raise ValueError("texts must not be empty")
        self.embed_calls += 1
        return [self._vector(t) for t in texts]

    def embed_query(self, texts):
        return [self._vector(t) for t in texts]

    @staticmethod
    def _vector(text):
        counts = [0.0] * 27
        for ch in text.lower():
            if "a" <= ch <= "z":
                counts[ord(ch) - ord("a")] += 1.0
        counts[26] = 1.0
        norm = math.sqrt(sum(c * c for c in counts))
        return [c / norm for c in counts]

    @property
    def dimension(self):
        return 27


class WhitespaceEncoding:
    def encode(self, text, disallowed_special=()):
        return text.split()


@pytest.fixture
def workspace(tmp_path):
    docs = tmp_path / "documents"
    docs.mkdir()
    (docs / "zebras.txt").write_text(
        "Zebras are African equines with distinctive black and white striped coats.",
        encoding="utf-8",
    )
    (docs / "budget.csv").write_text(
        "quarter,spend\nQ1,1200\nQ2,1500\n",
        encoding="utf-8",
    )
    (docs / "team.json").write_text(
        '{"lead": "Ada Lovelace", "members": ["Grace Hopper", "Alan Turing"]}',
        encoding="utf-8",
    )
    return tmp_path


def _settings(workspace, **overrides):
    values = {
        "docqa_documents_path": str(workspace / "documents"),
        "docqa_index_path": str(workspace / "Documents.index"),
        "docqa_question": "What are zebras?",
        "docqa_top_k": 2,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _llm(text="Zebras are striped equines."):
    llm = MagicMock()
    llm.invoke.return_value = MagicMock(content=text)
    return llm


class TestFullRun:
    def test_first_run_builds_then_second_run_reuses(self, workspace):
        settings = _settings(workspace)
        provider = LetterEmbeddingProvider()

        first = run_workflow(
            settings, encoding=WhitespaceEncoding(), embedding_provider=provider, llm=_llm(),
        )
        assert first["index_action"] == "built"
        assert provider.embed_calls == 1
        assert (workspace / "Documents.index").exists()

        answer = first["answer"]
        assert answer.text == "Zebras are striped equines."
        assert answer.question == "What are zebras?"
        assert len(answer.source_chunks) == 2

        second = run_workflow(
            settings, encoding=WhitespaceEncoding(), embedding_provider=provider, llm=_llm(),
        )
        assert second["index_action"] == "loaded"
        assert provider.embed_calls == 1
        assert len(second["answer"].source_chunks) == 2

    def test_index_holds_every_document_chunk(self, workspace):
        settings = _settings(workspace)
        run_workflow(
            settings,
            encoding=WhitespaceEncoding(),
            embedding_provider=LetterEmbeddingProvider(),
            llm=_llm(),
        )
        store = ChromaStore(path=str(settings.index_path))
        # 1 txt + 2 csv rows + 1 json
        assert store.count == 4

    def test_question_sent_to_llm_with_retrieved_context(self, workspace):
        llm = _llm()
        run_workflow(
            _settings(workspace),
            encoding=WhitespaceEncoding(),
            embedding_provider=LetterEmbeddingProvider(),
            llm=llm,
        )
        prompt = llm.invoke.call_args[0][0][1].content
        assert "Question: What are zebras?" in prompt

    def test_over_ceiling_does_no_index_work(self, workspace):
        provider = LetterEmbeddingProvider()
        llm = _llm()
        messages = []

        result = run_workflow(
            _settings(workspace, docqa_cost_ceiling=0.0, docqa_rate_per_1k_tokens=1.0),
            notify=messages.append,
            encoding=WhitespaceEncoding(),
            embedding_provider=provider,
            llm=llm,
        )

        assert result["skipped"] is True
        assert result["answer"] is None
        assert provider.embed_calls == 0
        llm.invoke.assert_not_called()
        assert not (workspace / "Documents.index").exists()
        assert messages[-1] == "The cost of embedding exceeds $0. Skipping embeddings."

    def test_over_ceiling_needs_no_credentials(self, workspace):
        settings = _settings(
            workspace,
            openai_api_key="",
            anthropic_api_key="",
            docqa_cost_ceiling=0.0,
            docqa_rate_per_1k_tokens=1.0,
        )

        result = run_workflow(settings, encoding=WhitespaceEncoding())

        assert result["skipped"] is True
        assert not (workspace / "Documents.index").exists()

    def test_missing_credentials_raised_after_gate_before_indexing(self, workspace):
        settings = _settings(workspace, openai_api_key="", anthropic_api_key="")
        messages = []

        with pytest.raises(MissingCredentialsError) as excinfo:
            run_workflow(settings, notify=messages.append, encoding=WhitespaceEncoding())

        assert excinfo.value.missing == ["OPENAI_API_KEY", "ANTHROPIC_API_KEY"]
        assert any(m.startswith("Cost calculated:") for m in messages)
        assert not (workspace / "Documents.index").exists()

    def test_injected_embeddings_only_need_llm_key(self, workspace):
        settings = _settings(
            workspace, openai_api_key="", anthropic_api_key="", docqa_llm_provider="google",
            google_api_key="",
        )

        with pytest.raises(MissingCredentialsError) as excinfo:
            run_workflow(
                settings,
                encoding=WhitespaceEncoding(),
                embedding_provider=LetterEmbeddingProvider(),
            )

        assert excinfo.value.missing == ["GOOGLE_API_KEY"]
        assert not (workspace / "Documents.index").exists()

    def test_missing_documents_directory_propagates(self, tmp_path):
        settings = Settings(
            _env_file=None,
            docqa_documents_path=str(tmp_path / "missing"),
            docqa_index_path=str(tmp_path / "Documents.index"),
        )
        with pytest.raises(FileNotFoundError):
            run_workflow(
                settings,
                encoding=WhitespaceEncoding(),
                embedding_provider=LetterEmbeddingProvider(),
                llm=_llm(),
            )
