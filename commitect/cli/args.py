"""CLI Argument Parsing"""

import argparse
import argcomplete

from commitect import INTENT_TYPE_NAMES, __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='commitect',
        description='Detect the intent of your changes and suggest a commit message',
        epilog=f"Known intents: {', '.join(INTENT_TYPE_NAMES)}. "
               'Example: commitect --watch (analyze each file as you save it)'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('folders', nargs='*', metavar='FOLDER', help='Workspace folder(s) to analyze (default: current directory)')

    # Trigger options
    parser.add_argument('-w', '--watch', action='store_true', help='Analyze files as they are saved instead of running once')
    parser.add_argument('--debounce', type=int, metavar='MS', help='Quiet period after a save before analyzing (default: 1000)')

    # API options
    parser.add_argument('--api-url', type=str, metavar='URL', help='Classification API endpoint')
    parser.add_argument('--timeout', type=int, metavar='MS', help='Request timeout in milliseconds (default: 30000)')
    parser.add_argument('--insecure', action='store_true', help='Skip SSL certificate verification (self-signed dev servers only)')

    # Output options
    parser.add_argument('--copy', type=str, choices=['message', 'full'], help='Copy the result without asking')
    parser.add_argument('--no-copy', action='store_true', help='Print the result only, never copy to clipboard')
    parser.add_argument('--no-status', action='store_true', help='Hide the progress status line')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')

    # Setup/config
    parser.add_argument('--setup', action='store_true', help='Configure defaults')
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
