"""Terminal rendering of the derived list view.

Renders only what ListView exposes: the visible tasks, the remaining count
and whether anything is completed. Text is word-wrapped to the terminal
width with continuation lines indented under the task text.
"""
from typing import List
import re, shutil
from models import Filter, ListView, Task
from theme import color, HEADER_COLOR, ID_COLOR, EMPTY_COLOR, MUTED_COLOR, ACTIVE_COLOR, COMPLETED_COLOR, BOLD

FILTER_TITLES = {Filter.ALL: 'All', Filter.ACTIVE: 'Active', Filter.COMPLETED: 'Completed'}
EMPTY_TEXT = 'No todos, add something productive'
MIN_WIDTH = 24
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def terminal_width() -> int:
    return max(MIN_WIDTH, shutil.get_terminal_size((80, 24)).columns)


def render(view: ListView, width: int = 80) -> List[str]:
    width = max(MIN_WIDTH, width)
    lines = [_filter_bar(view.filter), color('-' * width, HEADER_COLOR)]
    if not view.tasks:
        lines.append(color(EMPTY_TEXT, EMPTY_COLOR))
    for task in view.tasks:
        lines.extend(_wrap_task(task, width))
    lines.append(color('-' * width, HEADER_COLOR))
    lines.append(_footer(view))
    return lines


def display(view: ListView) -> None:
    for line in render(view, terminal_width()):
        print(line)


def _filter_bar(current: Filter) -> str:
    chips = []
    for f in Filter:
        title = FILTER_TITLES[f]
        if f is current:
            chips.append(color(f'[{title}]', HEADER_COLOR, BOLD))
        else:
            chips.append(color(f' {title} ', MUTED_COLOR))
    return ' '.join(chips)


def _footer(view: ListView) -> str:
    footer = f'{view.remaining} left'
    if view.has_completed:
        footer += "  (type 'clear' to remove completed)"
    return color(footer, MUTED_COLOR)


def _wrap_task(task: Task, width: int) -> List[str]:
    box = '[x] ' if task.completed else '[ ] '
    label = f'{task.id}.'
    prefix_visible = box + label + ' '
    prefix_colored = box + color(label, ID_COLOR) + ' '
    text_color = COMPLETED_COLOR if task.completed else ACTIVE_COLOR
    limit = max(1, width - len(prefix_visible))
    lines_raw: List[str] = []
    current = ''
    for w in task.text.split():
        candidate = w if not current else current + ' ' + w
        if len(candidate) <= limit:
            current = candidate
        else:
            if current:
                lines_raw.append(current)
            current = w
    if current:
        lines_raw.append(current)
    indent = ' ' * len(prefix_visible)
    colored: List[str] = []
    for idx, raw_line in enumerate(lines_raw):
        lead = prefix_colored if idx == 0 else indent
        colored.append(lead + color(raw_line, text_color))
    return colored
