#!/usr/bin/env python3
"""
minigrep - print every line of a file that contains a query string.

Usage:
    minigrep <query> <filename>

Set CASE_INSENSITIVE (to any value, in the shell or in a .env file) to
ignore case when matching.
"""

from __future__ import annotations

import os
import pathlib
import sys
from dataclasses import dataclass
from typing import Iterable, Mapping, TextIO

from dotenv import load_dotenv

ENV_CASE_INSENSITIVE = "CASE_INSENSITIVE"


# ----------------- Errors -----------------
class MinigrepError(Exception):
    """Base class for all errors reported by minigrep."""


class ConfigError(MinigrepError):
    pass


class MissingQuery(ConfigError):
    def __init__(self) -> None:
        super().__init__("Didn't get a query string")


class MissingFilename(ConfigError):
    def __init__(self) -> None:
        super().__init__("Didn't get a filename")


class FileReadError(MinigrepError):
    """The target file could not be opened, read or decoded."""

    def __init__(self, filename: str, reason: Exception) -> None:
        self.filename = filename
        if isinstance(reason, FileNotFoundError):
            message = f"File not found: {filename}"
        else:
            message = f"Error reading {filename}: {reason}"
        super().__init__(message)


# ----------------- Configuration -----------------
@dataclass(frozen=True)
class Config:
    """Arguments passed to minigrep via the terminal."""

    query: str
    filename: str
    case_sensitive: bool = True

    @classmethod
    def from_args(cls, args: Iterable[str], environ: Mapping[str, str] | None = None) -> "Config":
        """
        Build a Config from an argv-style sequence.

        The first element is the program name and is skipped. Anything after
        the filename is ignored. Matching is case-sensitive unless
        CASE_INSENSITIVE is present in ``environ`` (defaults to os.environ);
        its value does not matter.
        """
        if environ is None:
            environ = os.environ

        it = iter(args)
        next(it, None)

        query = next(it, None)
        if query is None:
            raise MissingQuery()
        filename = next(it, None)
        if filename is None:
            raise MissingFilename()

        case_sensitive = ENV_CASE_INSENSITIVE not in environ
        return cls(query=query, filename=filename, case_sensitive=case_sensitive)


# ----------------- Search -----------------
def split_lines(contents: str) -> list[str]:
    """
    Split on '\\n', dropping one '\\r' before each '\\n'. A lone '\\r' stays
    part of its line. A trailing newline does not start an extra empty line.
    """
    if not contents:
        return []
    lines = contents.split("\n")
    last = lines.pop()
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    if last:
        lines.append(last)
    return lines


def search(query: str, contents: str) -> list[str]:
    return [line for line in split_lines(contents) if query in line]


def search_case_insensitive(query: str, contents: str) -> list[str]:
    """Like :func:`search`, but compares lowercased copies. Returns the original lines."""
    query = query.lower()
    return [line for line in split_lines(contents) if query in line.lower()]


# ----------------- Run -----------------
def read_contents(filename: str) -> str:
    try:
        with open(filename, encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as err:
        raise FileReadError(filename, err) from err


def run(config: Config, out: TextIO | None = None) -> None:
    """Search config.filename for config.query and print matching lines to ``out``."""
    if out is None:
        out = sys.stdout

    contents = read_contents(config.filename)

    if config.case_sensitive:
        results = search(config.query, contents)
    else:
        results = search_case_insensitive(config.query, contents)

    for line in results:
        print(line, file=out)


def load_env() -> None:
    """
    Load a .env file, from the script folder first, then the working directory.
    Variables already set in the process environment win.
    """
    script_dir_env = pathlib.Path(__file__).parent / ".env"
    current_dir_env = pathlib.Path.cwd() / ".env"

    if script_dir_env.is_file():
        load_dotenv(dotenv_path=script_dir_env)
    elif current_dir_env.is_file():
        load_dotenv(dotenv_path=current_dir_env)


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv

    load_env()

    try:
        config = Config.from_args(argv)
    except ConfigError as err:
        prog = pathlib.Path(argv[0]).name if argv else "minigrep"
        print(f"Problem parsing arguments: {err}", file=sys.stderr)
        print(f"Usage: {prog} <query> <filename>", file=sys.stderr)
        sys.exit(1)

    try:
        run(config)
    except FileReadError as err:
        print(f"Application error: {err}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
