"""Unit tests for the typer CLI commands."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from config.settings import MissingCredentialsError, Settings, missing_credentials
from docqa.cli.main import app
from docqa.models.answer import Answer

runner = CliRunner()


@pytest.fixture
def docs_dir(tmp_path):
    root = tmp_path / "documents"
    root.mkdir()
    (root / "a.txt").write_text("Some notes about the project.", encoding="utf-8")
    return root


def _settings(tmp_path, **overrides):
    values = {
        "openai_api_key": "sk-test",
        "anthropic_api_key": "sk-ant-test",
        "docqa_documents_path": str(tmp_path / "documents"),
        "docqa_index_path": str(tmp_path / "Documents.index"),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestMissingCredentials:
    def test_reports_both_keys(self):
        settings = Settings(openai_api_key="", anthropic_api_key="", _env_file=None)
        assert missing_credentials(settings) == ["OPENAI_API_KEY", "ANTHROPIC_API_KEY"]

    def test_local_embeddings_need_no_openai_key(self):
        settings = Settings(
            docqa_embedding_provider="sentence-transformers",
            openai_api_key="",
            anthropic_api_key="x",
            _env_file=None,
        )
        assert missing_credentials(settings) == []

    def test_google_llm_needs_google_key(self):
        settings = Settings(
            docqa_llm_provider="google",
            openai_api_key="sk-test",
            google_api_key="",
            _env_file=None,
        )
        assert missing_credentials(settings) == ["GOOGLE_API_KEY"]

    def test_only_requested_providers_checked(self):
        settings = Settings(openai_api_key="", anthropic_api_key="", _env_file=None)
        assert missing_credentials(settings, embedding=False) == ["ANTHROPIC_API_KEY"]
        assert missing_credentials(settings, embedding=False, llm=False) == []


class TestRunCommand:
    def test_exits_when_credentials_missing(self, tmp_path):
        settings = _settings(tmp_path, openai_api_key="")
        with patch("docqa.cli.run.get_settings", return_value=settings), \
                patch(
                    "docqa.cli.run.run_workflow",
                    side_effect=MissingCredentialsError(["OPENAI_API_KEY"]),
                ):
            result = runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "OPENAI_API_KEY not set" in result.output

    def test_over_budget_run_needs_no_credentials(self, tmp_path):
        settings = _settings(tmp_path, openai_api_key="", anthropic_api_key="")
        with patch("docqa.cli.run.get_settings", return_value=settings), \
                patch("docqa.cli.run.run_workflow", return_value={"skipped": True}) as mock_run:
            result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        mock_run.assert_called_once()

    def test_prints_answer(self, tmp_path):
        settings = _settings(tmp_path)
        answer = Answer(
            question="Tell me about these docs",
            text="They describe the project.",
            source_chunks=[{
                "chunk_id": "c1",
                "source": "documents/a.txt",
                "chunk_index": 0,
                "chunk_text": "Some notes about the project.",
                "relevance_score": 0.9,
            }],
        )
        with patch("docqa.cli.run.get_settings", return_value=settings), \
                patch("docqa.cli.run.run_workflow", return_value={"skipped": False, "answer": answer}):
            result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        assert "They describe the project." in result.output
        assert "documents/a.txt" in result.output

    def test_question_override_reaches_workflow(self, tmp_path):
        settings = _settings(tmp_path)
        with patch("docqa.cli.run.get_settings", return_value=settings), \
                patch("docqa.cli.run.run_workflow", return_value={"skipped": True}) as mock_run:
            result = runner.invoke(app, ["run", "--question", "What changed?"])
        assert result.exit_code == 0
        used = mock_run.call_args[0][0]
        assert used.docqa_question == "What changed?"

    def test_rebuild_removes_index(self, tmp_path):
        settings = _settings(tmp_path)
        index_path = tmp_path / "Documents.index"
        index_path.mkdir()
        with patch("docqa.cli.run.get_settings", return_value=settings), \
                patch("docqa.cli.run.run_workflow", return_value={"skipped": True}):
            result = runner.invoke(app, ["run", "--rebuild"])
        assert result.exit_code == 0
        assert not index_path.exists()

    def test_no_subcommand_runs_workflow(self, tmp_path):
        settings = _settings(tmp_path)
        with patch("docqa.cli.run.get_settings", return_value=settings), \
                patch("docqa.cli.run.run_workflow", return_value={"skipped": True}) as mock_run:
            result = runner.invoke(app, [])
        assert result.exit_code == 0
        mock_run.assert_called_once()


class TestEstimateCommand:
    def test_reports_tokens_and_cost(self, tmp_path, docs_dir):
        settings = _settings(tmp_path)
        with patch("docqa.cli.estimate.get_settings", return_value=settings), \
                patch("docqa.cli.estimate.count_tokens", return_value=5000):
            result = runner.invoke(app, ["estimate"])
        assert result.exit_code == 0
        assert "Tokens: 5000" in result.output
        assert "$0.002000" in result.output
        assert "Within" in result.output

    def test_reports_over_ceiling(self, tmp_path, docs_dir):
        settings = _settings(tmp_path)
        with patch("docqa.cli.estimate.get_settings", return_value=settings), \
                patch("docqa.cli.estimate.count_tokens", return_value=5_000_000):
            result = runner.invoke(app, ["estimate", "--documents", str(docs_dir)])
        assert result.exit_code == 0
        assert "Exceeds" in result.output
