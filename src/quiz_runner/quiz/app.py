import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Static

from .console import choice_label, format_elapsed
from .questions import CHOICE_COUNT
from .session import QuizSession, SessionSnapshot

TICK_INTERVAL = 0.1


@dataclass(frozen=True)
class ScreenState:
    """Everything the widgets show for one snapshot."""

    prompt: str
    choice_labels: Tuple[str, ...]
    choice_enabled: Tuple[bool, ...]
    hint_enabled: bool
    hint_visible: bool
    next_visible: bool
    feedback: str
    score_text: str
    coin_text: str
    time_text: str


def build_screen_state(
    snapshot: SessionSnapshot, slots: int, time_precision: int = 1
) -> ScreenState:
    """Map a snapshot onto ``slots`` choice buttons.

    Labels for unused slots are empty, which hides the button.
    """
    question = snapshot.question
    choices = question.choices if question else ()
    labels = tuple(
        f"{choice_label(i)}) {choices[i]}" if i < len(choices) else ""
        for i in range(slots)
    )
    enabled = tuple(
        i < len(choices) and snapshot.choice_enabled(i) for i in range(slots)
    )

    if snapshot.is_finished:
        prompt = "Quiz Finished!"
        feedback = f"Final score: {snapshot.score}"
    else:
        prompt = question.prompt if question else ""
        feedback = ""
        if snapshot.is_answered:
            feedback = "Correct!" if snapshot.is_correct else "Wrong!"
        elif snapshot.disabled_choice_index is not None:
            feedback = (
                f"Hint: {choice_label(snapshot.disabled_choice_index)} "
                "is not the answer."
            )

    return ScreenState(
        prompt=prompt,
        choice_labels=labels,
        choice_enabled=enabled,
        hint_enabled=snapshot.hint_available,
        hint_visible=not snapshot.is_finished,
        next_visible=snapshot.is_answered,
        feedback=feedback,
        score_text=f"Score: {snapshot.score}",
        coin_text=str(snapshot.coins),
        time_text=format_elapsed(snapshot.elapsed, time_precision),
    )


class QuizApp(App):
    CSS_PATH = None
    CSS = """
#choices Button { width: 100%; margin: 0 0 1 0; }
#status Static { width: auto; margin: 0 2 0 0; }
#feedback { color: $accent; }
"""
    BINDINGS = [
        ("1", "choose(0)", "A"),
        ("2", "choose(1)", "B"),
        ("3", "choose(2)", "C"),
        ("4", "choose(3)", "D"),
        ("h", "hint", "Hint"),
        ("n", "next", "Next"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        session: QuizSession,
        *,
        time_precision: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        self._quiz = session
        self._time_precision = time_precision
        self._now = clock
        self._last_tick_at: Optional[float] = None
        self._view_ready = False
        self._choice_slots = max(
            [CHOICE_COUNT, *(len(q.choices) for q in session.questions)]
        )
        self._quiz.start()

    def compose(self) -> ComposeResult:
        with Horizontal(id="status"):
            yield Static("", id="score")
            yield Static("", id="coins")
            yield Static("", id="time")
        yield Static("", id="prompt")
        with Vertical(id="choices"):
            for i in range(self._choice_slots):
                yield Button("", id=f"choice-{i}")
        yield Static("", id="feedback")
        with Horizontal(id="controls"):
            yield Button("Hint", id="hint", variant="warning")
            yield Button("Next", id="next", variant="primary")

    def on_mount(self) -> None:
        self._view_ready = True
        self._last_tick_at = self._now()
        self.set_interval(TICK_INTERVAL, self._on_interval)
        self.refresh_view()

    # Event helpers usable without a running app
    def screen_state(self) -> ScreenState:
        return build_screen_state(
            self._quiz.snapshot(), self._choice_slots, self._time_precision
        )

    def select_choice(self, index: int) -> Optional[bool]:
        question = self._quiz.current_question
        if question is None or not 0 <= index < len(question.choices):
            return None
        outcome = self._quiz.select_answer(index)
        self.refresh_view()
        return outcome

    def request_hint(self) -> Optional[int]:
        disabled = self._quiz.use_hint()
        self.refresh_view()
        return disabled

    def next_question(self) -> bool:
        moved = self._quiz.advance()
        if moved:
            self._last_tick_at = self._now()
        self.refresh_view()
        return moved

    def tick_timer(self, delta: float) -> None:
        self._quiz.tick(delta)
        if self._view_ready:
            time_text = self.screen_state().time_text
            self.query_one("#time", Static).update(time_text)

    def refresh_view(self) -> None:
        """Re-render every widget from the current snapshot."""
        if not self._view_ready:
            return
        state = self.screen_state()
        self.query_one("#prompt", Static).update(state.prompt)
        for i, label in enumerate(state.choice_labels):
            button = self.query_one(f"#choice-{i}", Button)
            button.label = label
            button.display = bool(label) and state.hint_visible
            button.disabled = not state.choice_enabled[i]
        hint = self.query_one("#hint", Button)
        hint.display = state.hint_visible
        hint.disabled = not state.hint_enabled
        self.query_one("#next", Button).display = state.next_visible
        self.query_one("#feedback", Static).update(state.feedback)
        self.query_one("#score", Static).update(state.score_text)
        self.query_one("#coins", Static).update(state.coin_text)
        self.query_one("#time", Static).update(state.time_text)

    def _on_interval(self) -> None:
        now = self._now()
        if self._last_tick_at is not None:
            self.tick_timer(now - self._last_tick_at)
        self._last_tick_at = now

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid.startswith("choice-"):
            self.select_choice(int(bid.split("-", 1)[1]))
        elif bid == "hint":
            self.request_hint()
        elif bid == "next":
            self.next_question()

    def action_choose(self, index: int) -> None:
        self.select_choice(index)

    def action_hint(self) -> None:
        self.request_hint()

    def action_next(self) -> None:
        self.next_question()
