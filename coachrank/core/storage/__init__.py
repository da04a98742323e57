"""File-based input and output for the CLI."""

from .coach_files import CoachFileError, dump_csv, dump_json, load_coaches

__all__ = ["CoachFileError", "load_coaches", "dump_json", "dump_csv"]
