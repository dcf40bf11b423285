"""Stdin helpers used for secrets and config imports."""
import sys


def read_all_stdin() -> str:
    return sys.stdin.read()


def read_stdin_trimmed() -> str:
    return read_all_stdin().strip()
