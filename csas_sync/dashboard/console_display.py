"""Console display module for rendering published item updates to the terminal."""

import logging
from datetime import datetime

logger = logging.getLogger(__name__)


class ConsoleDisplay:
    """Prints item updates as they are published by the refresh cycle."""

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors
        self._setup_colors()
        logger.info("Console Display initialized")

    def _setup_colors(self) -> None:
        if self.use_colors:
            self.colors = {
                'reset': '\033[0m',
                'bold': '\033[1m',
                'green': '\033[92m',
                'red': '\033[91m',
                'cyan': '\033[96m',
                'gray': '\033[90m',
            }
        else:
            self.colors = {k: '' for k in ['reset', 'bold', 'green', 'red', 'cyan', 'gray']}

    def show_header(self) -> None:
        print(f"{self.colors['cyan']}{self.colors['bold']}")
        print("╔══════════════════════════════════════════════════════════════╗")
        print("║                         CSAS SYNC                            ║")
        print("║                      Item Updates                            ║")
        print("╚══════════════════════════════════════════════════════════════╝")
        print(self.colors['reset'])

    def show_update(self, item_name: str, value: str) -> None:
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        if not value:
            value_color = self.colors['gray']
            value = '(empty)'
        elif value.startswith('-') or value.startswith('RES -'):
            value_color = self.colors['red']
        else:
            value_color = self.colors['green']
        print(f"{self.colors['gray']}{timestamp}{self.colors['reset']} "
              f"{self.colors['bold']}{item_name:<30}{self.colors['reset']} "
              f"{value_color}{value}{self.colors['reset']}")
