"""Compose command lines for display.

These helpers only format strings; running them is the caller's business.
"""

import re
import shlex
from typing import Dict, List, Sequence

COMPOSE_ACTIONS: Dict[str, List[str]] = {
    'up': ['up'],
    'down': ['down'],
    'restart': ['down', 'up'],
}


def compose_command(command: str, files: Sequence[str] = (), detached: bool = True, build: bool = True) -> str:
    """Format a docker-compose command line.

    Args:
        command: 'up' or 'down'
        files: Compose files, each passed with -f
        detached: Add -d to 'up'
        build: Add --build to 'up'
    """
    if command not in ('up', 'down'):
        raise ValueError(f"Unsupported compose command: {command}")

    parts = ['docker-compose']
    for path in files:
        parts += ['-f', shlex.quote(path)]
    parts.append(command)

    if command == 'up':
        if detached:
            parts.append('-d')
        if build:
            parts.append('--build')

    return ' '.join(parts)


def compose_commands(action: str, files: Sequence[str] = (), detached: bool = True, build: bool = True) -> List[str]:
    """Command lines for an action, one per compose file (restart is down then up)."""
    if action not in COMPOSE_ACTIONS:
        raise ValueError(f"Unsupported compose action: {action}")

    commands = []
    for command in COMPOSE_ACTIONS[action]:
        if files:
            commands += [compose_command(command, [f], detached, build) for f in files]
        else:
            commands.append(compose_command(command, (), detached, build))
    return commands


def rewrite_for_new_cli(command: str) -> str:
    """Rewrite for the integrated `docker compose` CLI (e.g. ACI contexts).

    That CLI has no --build flag, so the first one is dropped.
    """
    command = re.sub(r'^docker-compose ', 'docker compose ', command)
    return re.sub(r'\s*--build', '', command, count=1)
