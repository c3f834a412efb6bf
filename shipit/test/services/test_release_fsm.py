from __future__ import annotations

from dataclasses import dataclass, replace

from shipit.core.result import Err, Ok, Result
from shipit.services.release.errors import ReleaseError
from shipit.services.release.fsm import FINISH, StepOutcome, advance, run_state_machine


@dataclass(frozen=True, slots=True)
class _State:
    step: str
    counter: int


def _step_a(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
    return Ok(advance(replace(s, step="b", counter=s.counter + 1)))


def _step_b(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
    return Ok(FINISH)


def test_run_state_machine_advances_and_reports() -> None:
    seen: list[_State] = []

    result = run_state_machine(
        initial_state=_State(step="a", counter=0),
        get_step=lambda s: s.step,
        handlers={"a": _step_a, "b": _step_b},
        on_advance=seen.append,
    )

    assert isinstance(result, Ok)
    assert result.value == _State(step="b", counter=1)
    assert seen == [_State(step="b", counter=1)]


def test_run_state_machine_stops_at_first_error() -> None:
    calls: list[str] = []

    def fail(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        calls.append(s.step)
        return Err(ReleaseError(kind="test_failed", message="boom"))

    def never(s: _State) -> Result[StepOutcome[_State], ReleaseError]:
        calls.append("never")
        return Ok(FINISH)

    result = run_state_machine(
        initial_state=_State(step="b", counter=0),
        get_step=lambda s: s.step,
        handlers={"b": fail, "c": never},
    )

    assert isinstance(result, Err)
    assert result.error.kind == "test_failed"
    assert calls == ["b"]


def test_run_state_machine_unknown_step_fails() -> None:
    result = run_state_machine(
        initial_state=_State(step="missing", counter=0),
        get_step=lambda s: s.step,
        handlers={},
    )

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
