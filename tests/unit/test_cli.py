"""
Tests for the resume_studio command line client.
"""

import argparse
import importlib.util
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.common.types import ArtifactKind, Session

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "resume_studio.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("resume_studio_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def fake_workflow():
    workflow = MagicMock()
    workflow.upload_resume = AsyncMock(return_value=True)
    workflow.submit = AsyncMock(return_value=True)
    workflow.download_pdf = AsyncMock(return_value=Path("out/ai-optimized-resume.pdf"))
    workflow.drain = AsyncMock()
    workflow.clear_history = AsyncMock(return_value=True)
    workflow.result.side_effect = lambda kind: f"{kind.value} output"
    workflow.session = Session()
    workflow.history = []
    return workflow


class TestParser:
    def test_generate_arguments(self, cli):
        args = cli.build_parser().parse_args(
            ["generate", "--resume", "cv.pdf", "--job", "jd.txt", "--kind", "both", "--pdf", "out"]
        )

        assert args.command == "generate"
        assert args.kind == "both"
        assert args.pdf == "out"

    def test_command_is_required(self, cli):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestCommands:
    @pytest.mark.asyncio
    async def test_generate_both(self, cli, tmp_path, capsys):
        resume = tmp_path / "cv.txt"
        resume.write_text("Jane Doe")
        job = tmp_path / "jd.txt"
        job.write_text("Senior Python Engineer")
        workflow = fake_workflow()
        args = argparse.Namespace(
            resume=str(resume), job=str(job), kind="both", pdf=str(tmp_path), quiet=False
        )

        assert await cli.cmd_generate(args, workflow) == 0

        workflow.upload_resume.assert_awaited_once_with("cv.txt", b"Jane Doe", "text/plain")
        workflow.set_inputs.assert_called_once_with(job_description="Senior Python Engineer")
        assert [c.args[0] for c in workflow.submit.await_args_list] == [ArtifactKind.RESUME, ArtifactKind.COVER]
        assert workflow.download_pdf.await_count == 2
        output = capsys.readouterr().out
        assert "resume output" in output and "cover output" in output

    @pytest.mark.asyncio
    async def test_generate_stops_when_upload_fails(self, cli, tmp_path):
        resume = tmp_path / "scan.pdf"
        resume.write_bytes(b"%PDF")
        workflow = fake_workflow()
        workflow.upload_resume = AsyncMock(return_value=False)
        args = argparse.Namespace(resume=str(resume), job="unused", kind="resume", pdf=None, quiet=True)

        assert await cli.cmd_generate(args, workflow) == 1
        workflow.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_history_clear(self, cli):
        workflow = fake_workflow()

        assert await cli.cmd_history(argparse.Namespace(clear=True), workflow) == 0
        workflow.clear_history.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_login_requires_auth_config(self, cli):
        assert await cli.cmd_login(argparse.Namespace(provider="github"), None) == 1
