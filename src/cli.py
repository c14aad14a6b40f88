"""Command-line interface loop for the todo list.

The CLI only reads the engine's derived view and forwards intents to it.
Every mutation persists inside the engine, so leaving the loop (exit,
Ctrl-C, EOF) has nothing left to save.
"""
from typing import List, Optional
from models import Filter
from task_list import TaskList, DragGesture
from view import display


def _clear_screen() -> None:
    # ESC[3J first (scrollback) improves reliability in some terminals
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


def _parse_id(raw: str) -> Optional[int]:
    raw = raw.rstrip('.')
    return int(raw) if raw.isdigit() else None


class CLI:
    def __init__(self, task_list: TaskList, alt_screen: bool = True):
        self.task_list: TaskList = task_list
        self.alt_screen: bool = alt_screen

    def run(self) -> None:
        """Main REPL loop; the list is cleared/redrawn each cycle.

        Output from the previous command (usage hints) is shown under the
        redrawn list, then the prompt.
        """
        exit_message: Optional[str] = None
        notice: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                self._redraw()
                if notice:
                    print(f"\n{notice}")
                    notice = None
                line = input("\n: ").strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    self._help()
                    input("\nPress Enter to return to the list...")
                    continue
                if lower in ('exit', 'quit', 'q'):
                    exit_message = "Goodbye."
                    break
                notice = self.handle_command(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)

    def _redraw(self) -> None:
        _clear_screen()
        print("Todo list:")
        display(self.task_list.derived_view())

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> Optional[str]:
        """Run one command line; returns a message for the user, if any."""
        tokens = line.split()
        if not tokens:
            return None
        cmd = tokens[0].lower()
        if cmd == 'add':
            return self._cmd_add(line)
        if cmd in ('t', 'toggle', 'done'):
            return self._cmd_toggle(tokens)
        if cmd in ('rm', 'remove', 'del'):
            return self._cmd_rm(tokens)
        if cmd in ('mv', 'move'):
            return self._cmd_mv(tokens)
        if cmd in ('f', 'filter'):
            return self._cmd_filter(tokens)
        if cmd == 'clear':
            return self._cmd_clear()
        return "Unknown command. Type 'help' for instructions."

    # ---- individual command helpers ----
    def _cmd_add(self, line: str) -> Optional[str]:
        parts = line.split(None, 1)
        if len(parts) > 1:
            text = parts[1]
        else:
            text = input("What needs to be done? ")
        # empty text is ignored by the engine
        self.task_list.add(text)
        return None

    def _cmd_toggle(self, tokens: List[str]) -> Optional[str]:
        ids = [_parse_id(t) for t in tokens[1:]]
        if not ids or None in ids:
            return "Usage: t <id> [<id> ...]"
        for tid in ids:
            self.task_list.toggle(tid)  # type: ignore[arg-type]
        return None

    def _cmd_rm(self, tokens: List[str]) -> Optional[str]:
        ids = [_parse_id(t) for t in tokens[1:]]
        if not ids or None in ids:
            return "Usage: rm <id> [<id> ...]"
        for tid in ids:
            self.task_list.remove(tid)  # type: ignore[arg-type]
        return None

    def _cmd_mv(self, tokens: List[str]) -> Optional[str]:
        args = [t for t in tokens[1:] if t.lower() != 'before']
        if len(args) != 2:
            return "Usage: mv <id> <before-id>"
        moved_id, before_id = _parse_id(args[0]), _parse_id(args[1])
        if moved_id is None or before_id is None:
            return "Invalid id."
        with DragGesture(self.task_list) as drag:
            drag.start(moved_id)
            drag.enter(before_id)
            drag.drop()
        return None

    def _cmd_filter(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: f <all|active|completed>"
        selected = Filter.parse(tokens[1])
        if selected is None:
            return "Invalid filter. Use all, active or completed."
        self.task_list.set_filter(selected)
        return None

    def _cmd_clear(self) -> Optional[str]:
        if not self.task_list.derived_view().has_completed:
            return "Nothing to clear."
        self.task_list.clear_completed()
        return None

    # -------------------- user-interactive flows --------------------
    def _help(self) -> None:
        print("Commands:")
        print("  add                 Add a task (prompts for text)")
        print("  add <text...>       Shorthand add with inline text (e.g., add buy milk)")
        print("  t <id> [<id>...]    Toggle completed (aliases: toggle, done)")
        print("  rm <id> [<id>...]   Remove tasks (aliases: remove, del)")
        print("  mv <id> <before>    Move a task so it sits just before another")
        print("  f <filter>          Show all / active / completed (a, ac, c)")
        print("  clear               Remove all completed tasks")
        print("  help                Show this help (press Enter to return)")
        print("  exit                Quit (the list is saved after every change)")
