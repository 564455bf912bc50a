"""CLI Commands"""

import os
import sys

from commitect.config import Config, load_config, save_config, get_config_path
from commitect.output import bold, dim, info, warning, print_success

ENV_API_URL = 'COMMITECT_API_URL'
ENV_TIMEOUT = 'COMMITECT_TIMEOUT'


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .commitectrc found)")

    env_url = os.environ.get(ENV_API_URL)
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_url or env_timeout:
        print(f"  {dim('Environment overrides:')}")
        if env_url:
            print(f"    {ENV_API_URL}={env_url}")
        if env_timeout:
            print(f"    {ENV_TIMEOUT}={env_timeout}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    api_url:            {info(config.api_url)}")
    print(f"    timeout:            {info(str(config.timeout))} ms")
    print(f"    enabled:            {info(str(config.enabled).lower())}")
    print(f"    debounce_delay:     {info(str(config.debounce_delay))} ms")
    print(f"    show_status_bar:    {info(str(config.show_status_bar).lower())}")
    insecure = str(config.allow_insecure_ssl).lower()
    print(f"    allow_insecure_ssl: {warning(insecure) if config.allow_insecure_ssl else info(insecure)}")
    print(f"    max_diff_size:      {info(str(config.max_diff_size))} bytes")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .commitectrc (in current directory)")
    print(f"    Global: ~/.commitectrc")
    print(f"\n  {dim('Run')} commitect --setup {dim('to configure')}\n")

    return 0


def run_setup() -> int:
    """Quick setup wizard."""
    display_config()
    print(f"{bold('Setup Wizard')}\n")

    defaults = Config()

    api_url = input(f"API URL (Enter for {defaults.api_url}): ").strip() or defaults.api_url

    print(f"\nRequest timeout in ms (Enter for {defaults.timeout}): ", end='')
    timeout_input = input().strip()
    timeout = int(timeout_input) if timeout_input.isdigit() else defaults.timeout

    print(f"\nDebounce delay after save in ms (Enter for {defaults.debounce_delay}): ", end='')
    debounce_input = input().strip()
    debounce_delay = int(debounce_input) if debounce_input.isdigit() else defaults.debounce_delay

    allow_insecure_ssl = False
    if api_url.lower().startswith('https://'):
        print("\nSkip SSL certificate verification (self-signed dev servers only)? [y/N]: ", end='')
        allow_insecure_ssl = input().strip().lower() == 'y'

    print("\nShow progress status line? [Y/n]: ", end='')
    show_status_bar = input().strip().lower() != 'n'

    config = Config(
        api_url=api_url,
        timeout=timeout,
        debounce_delay=debounce_delay,
        show_status_bar=show_status_bar,
        allow_insecure_ssl=allow_insecure_ssl,
    )
    for message in config.validate():
        print(f"Config warning: {message}", file=sys.stderr)
    path = save_config(config, global_config=True)

    print_success(f"Saved to {path}")
    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    line = 'eval "$(register-python-argcomplete commitect)"'
    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell commitect | Out-String | Invoke-Expression\n")
        print("To make it permanent, add it to your $PROFILE.")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish commitect | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0
