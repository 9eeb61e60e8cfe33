"""Interactive prompt flow.

The create flow is an explicit decision tree: an ordered list of
``PromptStep`` entries, each guarded by an optional ``when`` predicate over the
answers gathered so far.  ``run_prompts`` walks the list in order; answers
supplied up front (from CLI flags) skip their step.

Questions are asked through an ``Asker``.  ``RichAsker`` talks to the terminal
with ``rich.prompt``; tests inject a scripted asker instead.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from hoppen.config import Config
from hoppen.scaffolder.features import FEATURE_TITLES, Feature
from hoppen.utils import console, print_warning, slugify

Answers = dict[str, Any]


@dataclass(frozen=True)
class Choice:
    value: str
    title: str


class Asker(Protocol):
    """Anything that can put the four kinds of question to the user."""

    def text(self, message: str, default: str | None = None) -> str: ...

    def multiselect(self, message: str, choices: Sequence[Choice]) -> list[str]: ...

    def select(self, message: str, choices: Sequence[Choice]) -> str: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...


@dataclass
class PromptStep:
    """One question of a prompt flow.

    Attributes:
        name: Key the answer is stored under.
        kind: ``text``, ``multiselect``, ``select`` or ``confirm``.
        message: Question shown to the user; may be a callable over the
            answers so far.
        choices: Options for ``multiselect`` and ``select`` steps.
        when: Predicate over the answers so far; the step is skipped when it
            returns false.
        validate: Returns an error message for an unacceptable answer, or
            ``None``.  Rejected answers are asked again.
        default: Default for ``text`` and ``confirm`` steps.
    """

    name: str
    kind: str
    message: str | Callable[[Answers], str]
    choices: list[Choice] = field(default_factory=list)
    when: Callable[[Answers], bool] | None = None
    validate: Callable[[Any], str | None] | None = None
    default: Any = None

    def applies(self, answers: Answers) -> bool:
        return self.when is None or bool(self.when(answers))

    def render_message(self, answers: Answers) -> str:
        return self.message(answers) if callable(self.message) else self.message

    def ask(self, asker: Asker, answers: Answers) -> Any:
        message = self.render_message(answers)
        if self.kind == "text":
            return asker.text(message, self.default)
        if self.kind == "multiselect":
            return asker.multiselect(message, self.choices)
        if self.kind == "select":
            return asker.select(message, self.choices)
        if self.kind == "confirm":
            return asker.confirm(message, bool(self.default))
        raise ValueError(f"Unknown prompt kind: {self.kind!r}")


def run_prompts(
    steps: Sequence[PromptStep],
    asker: Asker,
    preset: Mapping[str, Any] | None = None,
) -> Answers:
    """Walk *steps* in order and return every answer, preset ones included."""
    answers: Answers = dict(preset or {})
    for step in steps:
        if step.name in answers or not step.applies(answers):
            continue
        while True:
            value = step.ask(asker, answers)
            error = step.validate(value) if step.validate else None
            if error is None:
                break
            print_warning(error)
        answers[step.name] = value
    return answers


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


def validate_project_name(value: str) -> str | None:
    if not value or not value.strip():
        return "Please provide a name"
    if not slugify(value):
        return "The name needs at least one letter or digit"
    return None


def create_steps(config: Config) -> list[PromptStep]:
    """Steps of the ``create`` flow: name, features, GSAP plugins, overwrite."""
    return [
        PromptStep(
            name="name",
            kind="text",
            message="Project name:",
            validate=validate_project_name,
        ),
        PromptStep(
            name="features",
            kind="multiselect",
            message="Select features to include",
            choices=[Choice(f.value, FEATURE_TITLES[f]) for f in Feature],
        ),
        PromptStep(
            name="plugins",
            kind="multiselect",
            message="Select optional GSAP plugins",
            choices=[Choice(p.id, p.name) for p in config.cdn.gsap_plugins],
            when=lambda a: Feature.GSAP.value in a.get("features", ()),
        ),
        PromptStep(
            name="overwrite",
            kind="confirm",
            message=lambda a: f"Project '{slugify(a['name'])}' exists. Overwrite?",
            when=lambda a: config.project_path(slugify(a["name"])).exists(),
            default=False,
        ),
    ]


def select_project_step(names: Sequence[str]) -> PromptStep:
    """Single ``select`` step listing existing projects in the given order."""
    return PromptStep(
        name="project",
        kind="select",
        message="Choose a project to start",
        choices=[Choice(n, n) for n in names],
    )


# ---------------------------------------------------------------------------
# Terminal asker
# ---------------------------------------------------------------------------


class RichAsker:
    """Asks questions on the terminal with ``rich.prompt``.

    Choice lists are shown as a numbered table.  A multiselect answer is a
    comma-separated list of numbers or ids, kept in the order typed; a blank
    answer selects nothing.
    """

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def text(self, message: str, default: str | None = None) -> str:
        if default is None:
            return Prompt.ask(message, console=self.console)
        return Prompt.ask(message, console=self.console, default=default)

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, console=self.console, default=default)

    def multiselect(self, message: str, choices: Sequence[Choice]) -> list[str]:
        self._show(message, choices)
        while True:
            raw = Prompt.ask(
                "Numbers or ids, comma-separated (blank for none)",
                console=self.console,
                default="",
                show_default=False,
            )
            try:
                return parse_selection(raw, choices)
            except ValueError as exc:
                print_warning(str(exc))

    def select(self, message: str, choices: Sequence[Choice]) -> str:
        self._show(message, choices)
        while True:
            raw = Prompt.ask("Number or id", console=self.console, default="1")
            try:
                picked = parse_selection(raw, choices)
            except ValueError as exc:
                print_warning(str(exc))
                continue
            if len(picked) == 1:
                return picked[0]
            print_warning("Pick exactly one entry")

    def _show(self, message: str, choices: Sequence[Choice]) -> None:
        table = Table(title=message, show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Option")
        table.add_column("Id", style="dim")
        for index, choice in enumerate(choices, start=1):
            table.add_row(str(index), choice.title, choice.value)
        self.console.print(table)


def parse_selection(raw: str, choices: Sequence[Choice]) -> list[str]:
    """Turn ``"2, gsap"`` into choice values, in typed order, without repeats.

    Raises:
        ValueError: If a token matches neither a number nor an id.
    """
    by_value = {c.value.lower(): c.value for c in choices}
    picked: list[str] = []
    for token in (t.strip() for t in raw.split(",")):
        if not token:
            continue
        if token.isdigit():
            index = int(token)
            if not 1 <= index <= len(choices):
                raise ValueError(f"No option number {index}")
            value = choices[index - 1].value
        elif token.lower() in by_value:
            value = by_value[token.lower()]
        else:
            raise ValueError(f"Unknown option: {token}")
        if value not in picked:
            picked.append(value)
    return picked
