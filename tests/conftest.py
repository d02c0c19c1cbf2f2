import subprocess
from types import SimpleNamespace

import pytest


class FakeStdin:
    """Stands in for sys.stdin: a terminal or a pipe holding ``text``."""

    def __init__(self, text="", tty=False, error=None):
        self.text = text
        self.tty = tty
        self.error = error
        self.reads = 0

    def isatty(self):
        return self.tty

    def read(self):
        self.reads += 1
        if self.error:
            raise self.error
        return self.text


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(self, executables=None, results=None, error=None):
        self.executables = executables or {}
        self.results = list(results or [])
        self.error = error
        self.calls = []

    def which(self, name):
        return self.executables.get(name)

    def run(self, args, input=None, timeout=None):
        self.calls.append(SimpleNamespace(args=list(args), input=input, timeout=timeout))
        if self.error:
            raise self.error
        if self.results:
            return self.results.pop(0)
        return completed()


def completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own arc settings out of the tests."""
    import os
    for key in list(os.environ):
        if key.startswith("ARC_ASK_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("ARC_AI_SOCKET", raising=False)


@pytest.fixture
def make_stdin():
    return FakeStdin


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def make_completed():
    return completed


@pytest.fixture
def config(tmp_path):
    """Minimal config object with the attributes the pipeline reads."""
    return SimpleNamespace(
        PROVIDER="anthropic",
        DEFAULT_MODEL="claude-sonnet-4-5-20250929",
        BACKEND="direct",
        PROMPTS_DIR=str(tmp_path / "prompts"),
        REQUEST_TIMEOUT=60.0,
        OLLAMA_URL="http://localhost:11434",
        OPENAI_BASE_URL=None,
        ANTHROPIC_BASE_URL="https://api.anthropic.com/v1/",
        VERBOSE=False,
    )
