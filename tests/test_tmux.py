import pytest

from arc_ask.errors import InvalidInputError, NotFoundError
from arc_ask.utils import tmux


@pytest.mark.parametrize("target", ["fe:0.0", "fe:4.1", "my-session:editor.12", "api:1.0"])
def test_valid_targets(target):
    tmux.validate_target(target)


@pytest.mark.parametrize("target", ["bad-format", "fe:0", "fe.0.0", ":0.0", "fe:0.x", "fe:0.0 ", "", None])
def test_invalid_targets(target):
    with pytest.raises(InvalidInputError):
        tmux.validate_target(target)


def test_capture_requires_tmux(make_runner):
    with pytest.raises(NotFoundError, match="tmux not found"):
        tmux.capture("fe:0.0", runner=make_runner())


def test_capture_oserror_is_not_found(make_runner):
    runner = make_runner(executables={"tmux": "/usr/bin/tmux"}, error=OSError("exec failed"))
    with pytest.raises(tmux.PaneNotFound, match="pane 'fe:0.0' not found"):
        tmux.capture("fe:0.0", runner=runner)


def test_list_panes(make_runner, make_completed):
    runner = make_runner(
        executables={"tmux": "/usr/bin/tmux"},
        results=[make_completed(stdout="fe:0.0\n\nfe:0.1\n")],
    )
    assert tmux.list_panes(runner) == ["fe:0.0", "fe:0.1"]
    assert runner.calls[0].args[:3] == ["tmux", "list-panes", "-a"]


def test_list_panes_when_server_not_running(make_runner, make_completed):
    runner = make_runner(executables={"tmux": "/usr/bin/tmux"}, results=[make_completed(returncode=1)])
    assert tmux.list_panes(runner) == []
    assert tmux.list_panes(make_runner()) == []


def test_missing_tmux_is_not_a_missing_pane(make_runner):
    with pytest.raises(NotFoundError) as exc:
        tmux.capture("fe:0.0", runner=make_runner())
    assert not isinstance(exc.value, tmux.PaneNotFound)
