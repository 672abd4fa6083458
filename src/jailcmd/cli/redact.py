"""Secret redaction for environment values echoed by the CLI.

`jailcmd show` prints the command line and environment a child would get.
Both can carry tokens (``--env=GITHUB_TOKEN=...``, ``--env API_KEY=...``),
so they pass through here before reaching the terminal.

Usage:
    from jailcmd.cli.redact import redact_argv, redact_env_dict

    click.echo(shlex.join(redact_argv(argv)))
"""
from __future__ import annotations

import re

# Value patterns that are secrets regardless of the variable name
_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r'\b(ghp_[A-Za-z0-9]{36,})\b'), '[REDACTED:github_pat]'),
    (re.compile(r'\b(github_pat_[A-Za-z0-9_]{22,})\b'), '[REDACTED:github_pat]'),
    (re.compile(r'\b(sk-[A-Za-z0-9_-]{20,})\b'), '[REDACTED:api_key]'),
    (re.compile(r'\b(AKIA[A-Z0-9]{16})\b'), '[REDACTED:aws_access_key]'),
    (re.compile(r'(https?://[^:/\s]+:)[^@\s]+(@[^\s]+)'), r'\1[REDACTED]\2'),
]

# Variable names whose values are never shown
_SENSITIVE_KEYS = (
    'password', 'passwd', 'secret', 'token', 'credential', 'auth',
)

# Matched as whole name segments only: API_KEY, SSH_KEY_FILE, but not KEYBOARD
_KEY_SEGMENTS = ('key', 'keys', 'apikey')
_SEGMENT_SPLIT = re.compile(r'[^a-z0-9]+')


def redact_secrets(text: str) -> str:
    """Replace known secret patterns in ``text`` with [REDACTED:type] markers."""
    if not text:
        return text
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def is_sensitive_key(name: str) -> bool:
    lowered = name.lower()
    if any(s in lowered for s in _SENSITIVE_KEYS):
        return True
    return any(part in _KEY_SEGMENTS for part in _SEGMENT_SPLIT.split(lowered))


def redact_env_dict(env: dict[str, str]) -> dict[str, str]:
    """Copy of ``env`` with sensitive values masked."""
    result = {}
    for key, value in env.items():
        if is_sensitive_key(key):
            result[key] = '[REDACTED]'
        else:
            result[key] = redact_secrets(value)
    return result


def redact_argv(argv: list[str]) -> list[str]:
    """Mask secrets inside ``--env=KEY=VALUE`` flags and other arguments."""
    result = []
    for arg in argv:
        if arg.startswith("--env=") and "=" in arg[len("--env="):]:
            key, value = arg[len("--env="):].split("=", 1)
            value = '[REDACTED]' if is_sensitive_key(key) else redact_secrets(value)
            result.append(f"--env={key}={value}")
        else:
            result.append(redact_secrets(arg))
    return result


__all__ = ['redact_secrets', 'redact_env_dict', 'redact_argv', 'is_sensitive_key']
