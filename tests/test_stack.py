"""
Stack lifecycle tests with a mocked compose runner.
"""

from unittest.mock import MagicMock, Mock, call, patch

import pytest

from bee_stack.compose import ComposeRunner
from bee_stack.env_file import parse_env_file
from bee_stack.errors import ComposeError, NotConfigured, UserAbort
from bee_stack.prompts import Prompter
from bee_stack.stack import Stack


def _runner(containers=None, curl_exit=0):
    runner = MagicMock(spec=ComposeRunner)
    runner.runtime = "docker"
    runner.ps_ids.return_value = list(containers or [])
    runner.run_container.return_value = curl_exit
    return runner


def _stack(tmp_path, answers, runner=None, assume_yes=False):
    remaining = list(answers)

    def reader(prompt):
        if not remaining:
            raise AssertionError(f"unexpected prompt: {prompt}")
        return remaining.pop(0)

    return Stack(tmp_path, "docker", Prompter(reader=reader, assume_yes=assume_yes), runner=runner or _runner())


class TestSetup:
    def test_watsonx_with_default_region(self, tmp_path):
        stack = _stack(tmp_path, ["1", "proj-1", " api-key ", "", "n"])

        stack.setup()

        assert parse_env_file(tmp_path / ".env") == {
            "LLM_BACKEND": "watsonx",
            "EMBEDDING_BACKEND": "watsonx",
            "WATSONX_PROJECT_ID": "proj-1",
            "WATSONX_API_KEY": "api-key",
            "WATSONX_REGION": "us-south",
            "RUNTIME": "docker",
        }
        assert not (tmp_path / ".env.tmp").exists()
        stack.runner.up.assert_not_called()

    def test_start_now(self, tmp_path):
        stack = _stack(tmp_path, ["3", "bam-key", "y"])

        stack.setup()

        assert parse_env_file(tmp_path / ".env")["BAM_API_KEY"] == "bam-key"
        stack.runner.up.assert_called_once_with("all")

    def test_existing_env_declined(self, tmp_path):
        (tmp_path / ".env").write_text("OLD=1\n")
        stack = _stack(tmp_path, ["4", "sk-test", "n"])

        with pytest.raises(UserAbort) as exc:
            stack.setup()

        assert exc.value.exit_code == 1
        assert (tmp_path / ".env").read_text() == "OLD=1\n"

    def test_existing_data_declined(self, tmp_path):
        (tmp_path / ".env").write_text("OLD=1\n")
        stack = _stack(tmp_path, ["4", "sk-test", "y", "n"], runner=_runner(containers=["abc123"]))

        with pytest.raises(UserAbort):
            stack.setup()

        stack.runner.down.assert_not_called()
        assert (tmp_path / ".env").read_text() == "OLD=1\n"

    def test_existing_data_removed(self, tmp_path):
        (tmp_path / ".env").write_text("OLD=1\n")
        stack = _stack(tmp_path, ["4", "sk-test", "y", "y", "n"], runner=_runner(containers=["abc123"]))

        stack.setup()

        assert stack.runner.down.call_args_list == [
            call("all", volumes=True),
            call("infra", volumes=True),
        ]
        assert parse_env_file(tmp_path / ".env")["OPENAI_API_KEY"] == "sk-test"

    def test_failing_ps_treated_as_no_data(self, tmp_path):
        (tmp_path / ".env").write_text("OLD=1\n")
        runner = ComposeRunner("docker", cwd=tmp_path)
        stack = _stack(tmp_path, ["4", "sk-test", "y", "n"], runner=runner)

        with patch("subprocess.run", return_value=Mock(returncode=1, stdout="", stderr="no daemon")) as mock_run:
            stack.setup()

        assert [c[0][0] for c in mock_run.call_args_list] == [["docker", "compose", "ps", "-aq"]]
        assert parse_env_file(tmp_path / ".env")["OPENAI_API_KEY"] == "sk-test"

    def test_ollama_connection_checked(self, tmp_path):
        stack = _stack(tmp_path, ["2", "", "n"])

        stack.setup()

        stack.runner.run_container.assert_called_once()
        args = stack.runner.run_container.call_args[0]
        assert args[0] == "curlimages/curl"
        assert args[-1] == "http://host.docker.internal:11434"
        assert parse_env_file(tmp_path / ".env")["OLLAMA_URL"] == "http://host.docker.internal:11434"

    def test_ollama_unreachable(self, tmp_path):
        stack = _stack(tmp_path, ["2", "http://localhost:11434"], runner=_runner(curl_exit=7))

        with pytest.raises(ComposeError) as exc:
            stack.setup()

        assert exc.value.exit_code == 2
        assert any("OLLAMA_HOST=0.0.0.0" in line for line in exc.value.details)
        assert not (tmp_path / ".env").exists()


class TestStart:
    def test_unconfigured_declined(self, tmp_path):
        stack = _stack(tmp_path, ["n"])

        with pytest.raises(NotConfigured) as exc:
            stack.start()

        assert exc.value.exit_code == 3
        stack.runner.up.assert_not_called()

    def test_unconfigured_runs_setup_first(self, tmp_path):
        stack = _stack(tmp_path, ["y", "4", "sk-test"])

        stack.start()

        assert (tmp_path / ".env").exists()
        stack.runner.up.assert_called_once_with("all")

    def test_configured(self, tmp_path, capsys):
        (tmp_path / ".env").write_text("RUNTIME=docker\n")
        stack = _stack(tmp_path, [])

        stack.start()

        stack.runner.up.assert_called_once_with("all")
        assert "http://localhost:3000" in capsys.readouterr().out


class TestOtherCommands:
    def test_start_infra(self, tmp_path):
        stack = _stack(tmp_path, [])

        stack.start_infra()

        assert (tmp_path / "tmp" / "code-interpreter-storage").is_dir()
        stack.runner.up.assert_called_once_with("infra")

    def test_stop(self, tmp_path):
        stack = _stack(tmp_path, [])

        stack.stop()

        assert stack.runner.down.call_args_list == [call("all"), call("infra")]

    def test_clean(self, tmp_path):
        leftover = tmp_path / "tmp" / "code-interpreter-storage" / "file.txt"
        leftover.parent.mkdir(parents=True)
        leftover.write_text("data")
        (tmp_path / "tmp" / "other").mkdir()
        stack = _stack(tmp_path, [])

        stack.clean()

        assert stack.runner.down.call_args_list == [
            call("all", volumes=True),
            call("infra", volumes=True),
        ]
        assert (tmp_path / "tmp" / "code-interpreter-storage").is_dir()
        assert not leftover.exists()
        assert not (tmp_path / "tmp" / "other").exists()
