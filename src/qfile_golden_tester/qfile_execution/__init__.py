"""q-file execution exports."""

from .qfile_case import QFileCase
from .qfile_client import QFileClient, RunPhase

__all__ = ["QFileCase", "QFileClient", "RunPhase"]
