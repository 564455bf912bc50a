"""CLI Main Entry Point"""

import os
import sys
from pathlib import Path

from loguru import logger

from commitect.cli.args import parse_args
from commitect.cli.commands import display_config, run_setup, run_install_completion, ENV_API_URL, ENV_TIMEOUT
from commitect.config import Config, ConfigManager, load_config, reload_config, get_config_path
from commitect.intent import Choice
from commitect.output import dim, print_error
from commitect.trigger import SaveWatcher, TerminalPresenter, TerminalStatus, TriggerController

COPY_CHOICES = {
    'message': Choice.COPY_MESSAGE,
    'full': Choice.COPY_FULL,
}


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}",
    )


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    if args.setup:
        return run_setup(), True
    return 0, False


def _apply_overrides(args, config: Config) -> Config:
    """Resolve settings for this run.

    Precedence: CLI args > environment variables > config file
    """
    config = config.snapshot()

    api_url = args.api_url or os.environ.get(ENV_API_URL)
    if api_url:
        config.api_url = api_url

    env_timeout = os.environ.get(ENV_TIMEOUT, '')
    if args.timeout is not None:
        config.timeout = args.timeout
    elif env_timeout.isdigit():
        config.timeout = int(env_timeout)

    if args.debounce is not None:
        config.debounce_delay = args.debounce
    if args.insecure:
        config.allow_insecure_ssl = True
    if args.no_status:
        config.show_status_bar = False

    for warning in config.validate():
        print(f"Config warning: {warning}", file=sys.stderr)
    return config


def _default_choice(args) -> Choice | None:
    if args.no_copy:
        return Choice.NONE
    return COPY_CHOICES.get(args.copy)


def _build_controller(args, config: Config, interactive: bool) -> TriggerController:
    presenter = TerminalPresenter(interactive=interactive, default_choice=_default_choice(args))
    status = TerminalStatus(enabled=config.show_status_bar)
    return TriggerController(presenter=presenter, status=status)


def _run_manual(args, config: Config) -> int:
    folders = [os.path.abspath(f) for f in (args.folders or [os.getcwd()])]
    interactive = sys.stdin.isatty() and sys.stdout.isatty()

    controller = _build_controller(args, config, interactive)
    try:
        result = controller.run_manual(folders, config)
    finally:
        controller.shutdown()
    return 0 if result.ok else 1


def _config_watch_path() -> Path:
    """The loaded config file, or the local one a reload would read first."""
    return get_config_path() or Path.cwd() / ConfigManager.CONFIG_FILENAME


def _run_watch(args, config: Config) -> int:
    if len(args.folders) > 1:
        print_error("--watch takes a single folder")
        return 1
    root = os.path.abspath(args.folders[0] if args.folders else os.getcwd())

    # Prompts cannot share the terminal with a background timer thread
    controller = _build_controller(args, config, interactive=False)
    current = {'config': config}

    def on_config_change():
        current['config'] = _apply_overrides(args, reload_config())
        controller.status.enabled = current['config'].show_status_bar
        if not current['config'].show_status_bar:
            controller.status.clear()

    watcher = SaveWatcher(
        root,
        controller,
        get_config=lambda: current['config'].snapshot(),
        config_path=_config_watch_path(),
        on_config_change=on_config_change,
    )

    print(f"Watching {root} for saved files. {dim('Press Ctrl+C to stop.')}")
    try:
        watcher.run_forever()
    except FileNotFoundError as e:
        print_error(str(e))
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    _configure_logging(args.verbose)

    # Handle subcommands that exit early
    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    config = _apply_overrides(args, load_config())

    if args.watch:
        return _run_watch(args, config)
    return _run_manual(args, config)


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
