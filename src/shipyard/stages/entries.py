"""Deploy entries: operator overrides injected before manifest rendering."""

from __future__ import annotations

from shipyard import constants
from shipyard.environment import EnvironmentStore
from shipyard.models import Entry, JavaOptsEntry, K8sEnvEntry, VariableEntry


def parse_env_lines(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines, ignoring blanks, comments and malformed lines."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip():
            values[key.strip()] = value.strip()
    return values


def contribute(entry: Entry, env: EnvironmentStore) -> None:
    """Write an entry's values into *env*, overwriting existing keys."""
    match entry:
        case JavaOptsEntry():
            env.set(constants.JAVA_OPTS, entry.text)
        case K8sEnvEntry():
            for key, value in parse_env_lines(entry.text).items():
                env.set(key, value)
        case VariableEntry():
            env.set(entry.key, entry.value)
        case _:
            raise TypeError(f"Unknown entry kind: {getattr(entry, 'kind', 'unknown')}")
