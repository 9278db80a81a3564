# tsm/visualization/renderer.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from tsm.core.transitions import describe_state


class VisualizationFormat(Enum):
    MERMAID = "mermaid"
    DOT = "dot"
    PLANTUML = "plantuml"


@dataclass(frozen=True)
class VisualizationConfig:
    """
    :param format: Output diagram syntax.
    :param include_history: Whether to draw the state history as a chain.
    """

    format: VisualizationFormat = VisualizationFormat.MERMAID
    include_history: bool = True


def render(current_state: Any, history: Optional[Sequence[Any]], config: Optional[VisualizationConfig] = None) -> str:
    """
    Render the current state and, optionally, the history as a text diagram.
    Output depends only on the arguments.
    """
    config = config or VisualizationConfig()
    states = list(history) if (config.include_history and history is not None) else None
    if config.format is VisualizationFormat.MERMAID:
        return _render_mermaid(current_state, states)
    if config.format is VisualizationFormat.DOT:
        return _render_dot(current_state, states)
    if config.format is VisualizationFormat.PLANTUML:
        return _render_plantuml(current_state, states)
    raise ValueError(f"Unsupported visualization format: {config.format!r}")


_ESCAPES = {
    VisualizationFormat.MERMAID: (('"', "#quot;"),),
    VisualizationFormat.DOT: (("\\", "\\\\"), ('"', '\\"')),
    VisualizationFormat.PLANTUML: (('"', "&#34;"),),
}


def _label(state: Any, fmt: VisualizationFormat) -> str:
    """Describe `state` for use inside a double-quoted label of `fmt`."""
    text = describe_state(state)
    for raw, escaped in _ESCAPES[fmt]:
        text = text.replace(raw, escaped)
    return text


def _render_mermaid(current_state: Any, history: Optional[List[Any]]) -> str:
    fmt = VisualizationFormat.MERMAID
    lines = ["graph TD", f'    Current["Current: {_label(current_state, fmt)}"]']
    if history is not None:
        lines.append("    subgraph History")
        for index, state in enumerate(history):
            lines.append(f'        H{index}["{_label(state, fmt)}"]')
            if index > 0:
                lines.append(f"        H{index - 1} --> H{index}")
        lines.append("    end")
    return "\n".join(lines) + "\n"


def _render_dot(current_state: Any, history: Optional[List[Any]]) -> str:
    fmt = VisualizationFormat.DOT
    lines = ["digraph StateMachine {", f'    Current [label="Current: {_label(current_state, fmt)}"]']
    if history is not None:
        lines.append("    subgraph cluster_history {")
        lines.append('        label="History"')
        for index, state in enumerate(history):
            lines.append(f'        H{index} [label="{_label(state, fmt)}"]')
            if index > 0:
                lines.append(f"        H{index - 1} -> H{index}")
        lines.append("    }")
    lines.append("}")
    return "\n".join(lines) + "\n"


def _render_plantuml(current_state: Any, history: Optional[List[Any]]) -> str:
    fmt = VisualizationFormat.PLANTUML
    lines = ["@startuml", f'state "Current: {_label(current_state, fmt)}" as Current']
    if history is not None:
        lines.append('state "History" as History {')
        for index, state in enumerate(history):
            lines.append(f'    state "{_label(state, fmt)}" as H{index}')
            if index > 0:
                lines.append(f"    H{index - 1} --> H{index}")
        lines.append("}")
    lines.append("@enduml")
    return "\n".join(lines) + "\n"
