import threading
import pytest
from cloudwordle.config.game_settings import (
    DELETE_KEY, MSG_NOT_ENOUGH_LETTERS, MSG_NOT_IN_WORD_LIST, MSG_VALIDATION_ERROR,
)
from cloudwordle.models.game import SessionState
from cloudwordle.services.input_gate import InputGate, RevealSchedule, normalize_key
from cloudwordle.services.session import Session
from conftest import ScriptedValidator, no_sleep, sync_spawn, type_word


def make_gate(renderer, validator=None, target="CRANE", **kwargs):
    options = {'sleep': no_sleep, 'spawn': sync_spawn}
    options.update(kwargs)
    return InputGate(Session(target), renderer=renderer, word_validator=validator, **options)


class BlockingValidator:
    """Holds the word check open until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def is_valid_word(self, word):
        self.calls += 1
        self.started.set()
        self.release.wait(5)
        return True


def test_normalize_key():
    assert normalize_key("enter") == "ENTER"
    assert normalize_key("Backspace") == DELETE_KEY
    assert normalize_key(DELETE_KEY) == DELETE_KEY
    assert normalize_key("q") == "Q"
    assert normalize_key("1") is None
    assert normalize_key("Shift") is None
    assert normalize_key(None) is None


def test_reveal_schedule_offsets():
    schedule = RevealSchedule(letter_delay=0.3, total_duration=1.5)
    assert schedule.offsets(5) == pytest.approx([0.0, 0.3, 0.6, 0.9, 1.2])
    assert schedule.settle_delay(5) == pytest.approx(0.3)


def test_letters_and_delete_update_tiles(renderer):
    gate = make_gate(renderer)
    assert gate.handle_key("c") is True
    assert gate.handle_key("Backspace") is True
    assert gate.handle_key("Backspace") is False
    assert renderer.named('update_tile') == [
        ('update_tile', 0, 0, 'C', None),
        ('update_tile', 0, 0, '', None),
    ]


def test_incomplete_row_shows_message(renderer, validator):
    gate = make_gate(renderer, validator)
    type_word(gate, "CRA")
    assert gate.handle_key("ENTER") is False
    assert renderer.messages == [MSG_NOT_ENOUGH_LETTERS]
    assert validator.checked == []
    assert gate.is_validating is False


def test_invalid_word_reopens_gate_without_consuming_attempt(renderer):
    validator = ScriptedValidator(rejected={"XXXXX"})
    gate = make_gate(renderer, validator)
    type_word(gate, "XXXXX")
    gate.handle_key("ENTER")

    assert renderer.messages == [MSG_NOT_IN_WORD_LIST]
    assert gate.is_validating is False
    assert gate.session.state is SessionState.FILLING
    assert gate.session.cursor_index == 5
    assert gate.session.attempt_index == 0
    assert gate.handle_key(DELETE_KEY) is True


def test_validator_failure_reopens_gate(renderer):
    validator = ScriptedValidator(failing={"SLATE"})
    gate = make_gate(renderer, validator)
    type_word(gate, "SLATE")
    gate.handle_key("ENTER")

    assert renderer.messages == [MSG_VALIDATION_ERROR]
    assert gate.is_validating is False
    assert gate.session.state is SessionState.FILLING
    assert gate.session.cursor_index == 5
    assert gate.session.history == ()


def test_spawn_failure_reopens_gate(renderer):
    def broken_spawn(target, *args):
        raise RuntimeError("no worker available")

    gate = make_gate(renderer, spawn=broken_spawn)
    type_word(gate, "SLATE")
    assert gate.handle_key("ENTER") is False
    assert gate.is_validating is False
    assert gate.session.state is SessionState.FILLING
    assert renderer.messages == [MSG_VALIDATION_ERROR]


def test_reveal_failure_still_completes_the_row(renderer):
    class FlakyRenderer(type(renderer)):
        def update_key(self, letter, status):
            raise RuntimeError("socket closed")

    flaky = FlakyRenderer()
    finished = []
    gate = make_gate(flaky, on_terminal=finished.append)
    type_word(gate, "CRANE")
    gate.handle_key("ENTER")

    assert gate.is_validating is False
    assert gate.game_over is True
    assert finished == [gate.session]


def test_accepted_guess_reveals_in_order_then_advances(renderer, validator):
    sleeps = []
    gate = make_gate(renderer, validator, sleep=sleeps.append)
    type_word(gate, "SLATE")
    renderer.calls.clear()
    gate.handle_key("ENTER")

    tiles = renderer.named('update_tile')
    assert [call[2] for call in tiles] == [0, 1, 2, 3, 4]
    assert [call[4] for call in tiles] == ["absent", "absent", "correct", "absent", "correct"]
    assert ('update_key', 'A', 'correct') in renderer.calls
    assert abs(sum(sleeps) - 1.5) < 1e-9
    assert gate.session.attempt_index == 1
    assert gate.session.state is SessionState.FILLING
    assert gate.is_validating is False


def test_keys_are_ignored_while_validating(renderer):
    validator = BlockingValidator()
    gate = InputGate(Session("CRANE"), renderer=renderer, word_validator=validator, sleep=no_sleep)
    type_word(gate, "SLATE")

    assert gate.handle_key("ENTER") is True
    assert validator.started.wait(5)

    assert gate.is_validating is True
    assert gate.handle_key("ENTER") is False
    assert gate.handle_key("ENTER") is False
    assert gate.handle_key(DELETE_KEY) is False
    assert gate.handle_key("Q") is False

    validator.release.set()
    gate.join(5)

    assert validator.calls == 1
    assert len(gate.session.history) == 1
    assert gate.is_validating is False
    assert gate.session.attempt_index == 1


def test_double_enter_from_two_threads_submits_once(renderer):
    validator = BlockingValidator()
    gate = InputGate(Session("CRANE"), renderer=renderer, word_validator=validator, sleep=no_sleep)
    type_word(gate, "SLATE")

    results = []
    barrier = threading.Barrier(2)

    def press_enter():
        barrier.wait()
        results.append(gate.handle_key("ENTER"))

    presses = [threading.Thread(target=press_enter) for _ in range(2)]
    for press in presses:
        press.start()
    for press in presses:
        press.join(5)

    validator.release.set()
    gate.join(5)

    assert sorted(results) == [False, True]
    assert validator.calls == 1
    assert len(gate.session.history) == 1


def test_win_calls_terminal_handler_after_reveal(renderer, validator):
    seen = []

    def on_terminal(session):
        seen.append(len(renderer.named('update_tile')))
        renderer.show_modal("You Won!", session.target_word)

    gate = make_gate(renderer, validator, on_terminal=on_terminal)
    type_word(gate, "CRANE")
    gate.handle_key("ENTER")

    assert gate.game_over is True
    # 5 typed tiles + 5 revealed tiles were drawn before the handler ran
    assert seen == [10]
    assert renderer.calls[-1] == ('show_modal', 'You Won!', 'CRANE')
    assert gate.handle_key("A") is False


def test_terminal_handler_errors_do_not_stick_the_gate(renderer):
    def on_terminal(session):
        raise RuntimeError("stats exploded")

    gate = make_gate(renderer, on_terminal=on_terminal)
    type_word(gate, "CRANE")
    gate.handle_key("ENTER")
    assert gate.is_validating is False
    assert gate.game_over is True


def test_reset_refused_while_validating(renderer):
    validator = BlockingValidator()
    gate = InputGate(Session("CRANE"), renderer=renderer, word_validator=validator, sleep=no_sleep)
    type_word(gate, "SLATE")
    gate.handle_key("ENTER")
    assert validator.started.wait(5)

    assert gate.reset(Session("SLATE")) is False

    validator.release.set()
    gate.join(5)
    assert gate.reset(Session("SLATE")) is True
    assert gate.session.target_word == "SLATE"
    assert gate.game_over is False
