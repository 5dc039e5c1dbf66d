#!/usr/bin/env python3
"""
Tests for the command-line entry point
"""
import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from orthocds.cli.main import build_parser, main
from orthocds.core.logging_config import LoggingManager
from orthocds.pipelines.cleaning import TranscriptCleaningPipeline

from .conftest import FakePredictor


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; undo it after each test"""
    root = logging.getLogger()
    tools = logging.getLogger("orthocds.tools")
    handlers, level, tools_level = root.handlers[:], root.level, tools.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    tools.setLevel(tools_level)


@pytest.mark.unit
class TestParser:

    def test_run_options(self):
        args = build_parser().parse_args([
            "run", "-t", "asm.fa", "-o", "out", "--method", "estscan", "--stranded",
            "--min-length", "300", "--gap-threshold", "0.2", "--workers", "4",
        ])
        assert args.command == "run"
        assert args.method == "estscan"
        assert args.stranded is True
        assert args.min_length == 300
        assert args.gap_threshold == 0.2
        assert args.workers == 4
        assert args.dedup is None

    def test_unknown_method_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run", "-t", "a", "-o", "b", "--method", "glimmer"])


@pytest.mark.integration
class TestMain:

    @pytest.fixture
    def fake_pipeline(self):
        """Pipeline construction with the predictor replaced by a fake"""
        original = TranscriptCleaningPipeline.from_context.__func__

        def build(cls, context, **kwargs):
            pipeline = original(cls, context, **kwargs)
            pipeline.predictor = FakePredictor()
            return pipeline

        with patch.object(TranscriptCleaningPipeline, "from_context", classmethod(build)), \
                patch("orthocds.tools.factory.ToolFactory.check_requirements"):
            yield

    def test_run_prints_json_summary(self, fake_pipeline, transcripts_fasta, temp_dir, capsys):
        output_dir = os.path.join(temp_dir, "out")
        code = main(["--json", "run", "-t", transcripts_fasta, "-o", output_dir, "--min-length", "12"])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary['written'] == 2
        assert summary['method'] == "transdecoder"

    def test_text_run_logs_progress_on_stdout(self, fake_pipeline, transcripts_fasta, temp_dir, capsys):
        code = main(["run", "-t", transcripts_fasta, "-o", os.path.join(temp_dir, "out")])

        assert code == 0
        out = capsys.readouterr().out
        assert "Written:" in out
        assert "INFO - Cleaning complete" in out

    def test_existing_output_dir_exit_code(self, fake_pipeline, transcripts_fasta, temp_dir, capsys):
        code = main(["run", "-t", transcripts_fasta, "-o", temp_dir])

        assert code == 1
        assert "OutputExistsError" in capsys.readouterr().err

    def test_missing_tools_exit_code(self, transcripts_fasta, temp_dir, capsys):
        with patch("orthocds.tools.factory.check_tool_requirements",
                   return_value=(False, ["TransDecoder.LongOrfs"])):
            code = main(["run", "-t", transcripts_fasta, "-o", os.path.join(temp_dir, "out")])

        assert code == 1
        assert "TransDecoder.LongOrfs" in capsys.readouterr().err
        assert not os.path.exists(os.path.join(temp_dir, "out"))

    def test_check_tools(self, capsys):
        with patch("orthocds.cli.main.check_command_availability", return_value=True):
            code = main(["--json", "check-tools"])

        assert code == 0
        status = json.loads(capsys.readouterr().out)
        assert status["hmmsearch"] is True
        assert "cd-hit-est" in status

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


@pytest.mark.unit
class TestLoggingSetup:

    def test_log_dir_gets_generated_file(self, temp_dir):
        log_dir = os.path.join(temp_dir, "logs")
        logger = LoggingManager.configure(component="orthocds", log_dir=log_dir)
        logger.info("hello")

        files = os.listdir(log_dir)
        assert len(files) == 1
        assert files[0].startswith("orthocds_") and files[0].endswith(".log")

    def test_tool_level_from_config(self):
        LoggingManager.configure(config={'logging': {'level': 'INFO', 'tool_level': 'warning'}})

        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("orthocds.tools").level == logging.WARNING

    def test_verbose_overrides_config(self):
        LoggingManager.configure(verbose=True, config={'logging': {'tool_level': 'ERROR'}})

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("orthocds.tools").level == logging.DEBUG

    def test_console_lines_go_to_stdout(self, capsys):
        LoggingManager.configure()
        logging.getLogger("orthocds.pipelines.strand").warning("strand skew")

        captured = capsys.readouterr()
        assert "WARNING - strand skew" in captured.out
        assert captured.err == ""

    def test_stream_can_be_redirected(self, capsys):
        LoggingManager.configure(stream=sys.stderr)
        logging.getLogger("orthocds").warning("kept off stdout")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "kept off stdout" in captured.err
