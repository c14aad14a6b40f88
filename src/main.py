"""Main entry point for the terminal todo list."""
import sys
from loguru import logger
from settings import load_settings
from storage import JsonFileStore, TaskStore
from task_list import TaskList
from cli import CLI


def configure_logging(level: str = "WARNING") -> None:
    """Configure loguru; stderr only so the REPL screen stays clean at default level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan> - {message}",
    )


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    store = TaskStore(JsonFileStore(settings.data_file))
    task_list = TaskList.load(store, insert_position=settings.insert_position)
    logger.info("Loaded {} task(s) from {}", len(task_list), settings.data_file)
    CLI(task_list, alt_screen=settings.alt_screen).run()

if __name__ == "__main__":
    main()
