"""
Editor session state machine.

The session record is immutable; ``transition`` is a pure function from
(state, event) to the next state. ``SessionController`` is the dispatch
layer: it applies events in the order they arrive and performs the side
effects (write-through persistence, remote runs, file transfer).

Runs are tagged with increasing sequence numbers. By default a run that
completes after a newer one has already been applied is dropped, so the
display always reflects the most recently started run.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from document_store import DEFAULT_CODE, DocumentStore
from execution_client import (
    CONNECTION_FAILURE_RESULT, EMPTY_RESULT, ExecutionResult,
)
from file_transfer import ExportArtifact, export_document, import_file

logger = logging.getLogger(__name__)

Submitter = Callable[[str, str], Awaitable[ExecutionResult]]
FileReader = Callable[[object], Awaitable[Optional[str]]]


class PresentationMode(Enum):
    DARK = "dark"
    LIGHT = "light"

    def toggled(self) -> "PresentationMode":
        return PresentationMode.LIGHT if self is PresentationMode.DARK else PresentationMode.DARK


@dataclass(frozen=True)
class SessionState:
    """Everything the page shows, in one record."""

    document: str = DEFAULT_CODE
    program_input: str = ""
    result: ExecutionResult = EMPTY_RESULT
    mode: PresentationMode = PresentationMode.DARK
    next_run_seq: int = 1
    last_run_seq: int = 0  # highest run whose result has been applied


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Edit:
    text: str


@dataclass(frozen=True)
class InputEdit:
    text: str


@dataclass(frozen=True)
class RunStarted:
    seq: int


@dataclass(frozen=True)
class RunCompleted:
    seq: int
    result: ExecutionResult


@dataclass(frozen=True)
class ToggleTheme:
    pass


@dataclass(frozen=True)
class Imported:
    text: str


@dataclass(frozen=True)
class Reset:
    pass


Event = Union[Edit, InputEdit, RunStarted, RunCompleted, ToggleTheme, Imported, Reset]


def transition(state: SessionState, event: Event,
               discard_stale_runs: bool = True) -> SessionState:
    """Return the state that follows *state* after *event*."""
    if isinstance(event, Edit):
        return replace(state, document=event.text)
    if isinstance(event, InputEdit):
        return replace(state, program_input=event.text)
    if isinstance(event, RunStarted):
        return replace(state, next_run_seq=max(state.next_run_seq, event.seq + 1))
    if isinstance(event, RunCompleted):
        if discard_stale_runs and event.seq <= state.last_run_seq:
            return state
        return replace(
            state,
            result=event.result,
            last_run_seq=max(state.last_run_seq, event.seq),
        )
    if isinstance(event, ToggleTheme):
        return replace(state, mode=state.mode.toggled())
    if isinstance(event, Imported):
        return replace(state, document=event.text)
    if isinstance(event, Reset):
        return replace(state, document=DEFAULT_CODE, result=EMPTY_RESULT)
    raise TypeError(f"Unknown session event: {event!r}")


def initial_state(store: DocumentStore) -> SessionState:
    return SessionState(document=store.load())


class SessionController:
    """Owns the live SessionState and wires events to their side effects.

    Args:
        store: Persisted document slot; saved after every document change.
        submit: Async callable ``(code, input) -> ExecutionResult``.
        read_file: Async callable turning a selected file into text, or
            None when nothing usable was selected.
        discard_stale_runs: Drop results of runs superseded by a newer run.
            When False, whichever response lands last wins.
        on_change: Called with the new state after every applied event.
    """

    def __init__(self, store: DocumentStore, submit: Submitter,
                 read_file: FileReader = import_file,
                 discard_stale_runs: bool = True,
                 on_change: Optional[Callable[[SessionState], None]] = None):
        self.store = store
        self._submit = submit
        self._read_file = read_file
        self.discard_stale_runs = discard_stale_runs
        self.on_change = on_change
        self._state = initial_state(store)

    @property
    def state(self) -> SessionState:
        return self._state

    def dispatch(self, event: Event) -> SessionState:
        new_state = transition(self._state, event, self.discard_stale_runs)
        if new_state is self._state:
            return new_state
        self._state = new_state
        if self.on_change is not None:
            self.on_change(new_state)
        return new_state

    # -- user actions -------------------------------------------------------

    def on_edit(self, text: str) -> None:
        self.dispatch(Edit(text))
        self.store.save(text)

    def on_input_edit(self, text: str) -> None:
        self.dispatch(InputEdit(text))

    async def on_run(self) -> ExecutionResult:
        """Submit the current document and input; apply the reply when it lands."""
        seq = self._state.next_run_seq
        code = self._state.document
        program_input = self._state.program_input
        self.dispatch(RunStarted(seq))
        logger.debug("Run %d started", seq)

        try:
            result = await self._submit(code, program_input)
        except Exception:
            logger.exception("Run %d: submitter raised", seq)
            result = CONNECTION_FAILURE_RESULT

        before = self._state
        self.dispatch(RunCompleted(seq, result))
        if self._state is before:
            logger.info("Run %d superseded by run %d; result dropped",
                        seq, before.last_run_seq)
        return result

    def on_toggle_theme(self) -> PresentationMode:
        return self.dispatch(ToggleTheme()).mode

    def on_export(self) -> ExportArtifact:
        return export_document(self._state.document)

    async def on_import_selected(self, selected) -> bool:
        """Replace the document with the selected file's text.

        Returns False (and changes nothing) when no file was selected or
        it could not be read.
        """
        text = await self._read_file(selected)
        if text is None:
            return False
        self.dispatch(Imported(text))
        self.store.save(text)
        return True

    def on_reset(self) -> None:
        self.dispatch(Reset())
        self.store.save(DEFAULT_CODE)
