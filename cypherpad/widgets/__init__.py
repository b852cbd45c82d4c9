"""Widget library for the Textual UI."""

from __future__ import annotations

from .database_picker import DatabasePicker
from .query_pad import QueryPad
from .result_view import ResultView
from .status_bar import StatusBar

__all__ = ["DatabasePicker", "QueryPad", "ResultView", "StatusBar"]
