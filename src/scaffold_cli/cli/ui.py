"""Reusable UI helpers for template-scaffold CLI output."""

from __future__ import annotations

from dataclasses import dataclass

from rich.tree import Tree

STATUS_SYMBOLS = {
    "pending": "[green dim]○[/green dim]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
}


@dataclass
class Step:
    key: str
    label: str
    status: str = "pending"
    detail: str = ""


class StepTracker:
    """Track a flat list of steps and render them as a Rich tree."""

    def __init__(self, title: str):
        self.title = title
        self.steps: list[Step] = []

    def add(self, key: str, label: str) -> None:
        if self._find(key) is None:
            self.steps.append(Step(key, label))

    def complete(self, key: str, detail: str = "") -> None:
        self._update(key, "done", detail)

    def error(self, key: str, detail: str = "") -> None:
        self._update(key, "error", detail)

    def _find(self, key: str) -> Step | None:
        return next((step for step in self.steps if step.key == key), None)

    def _update(self, key: str, status: str, detail: str) -> None:
        step = self._find(key)
        if step is None:
            step = Step(key, key)
            self.steps.append(step)
        step.status = status
        if detail:
            step.detail = detail

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            symbol = STATUS_SYMBOLS.get(step.status, " ")
            detail = step.detail.strip()
            if step.status == "pending":
                text = f"{step.label} ({detail})" if detail else step.label
                tree.add(f"{symbol} [bright_black]{text}[/bright_black]")
            elif detail:
                tree.add(f"{symbol} [white]{step.label}[/white] [bright_black]({detail})[/bright_black]")
            else:
                tree.add(f"{symbol} [white]{step.label}[/white]")
        return tree


__all__ = ["Step", "StepTracker"]
