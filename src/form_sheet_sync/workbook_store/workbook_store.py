"""Excel workbook tabular store: one workbook per destination."""

from __future__ import annotations

import logging
import re
import uuid
import zipfile
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from filelock import Timeout
from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, Cell
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from form_sheet_sync.file_coordination import (
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    atomic_replace,
    path_lock,
)
from form_sheet_sync.sync_orchestration.sync_contracts import DestinationHandle
from form_sheet_sync.sync_orchestration.sync_errors import (
    DestinationCreateError,
    DestinationMissing,
    DestinationUnavailable,
)

from .constants import (
    HEADER_FILL_COLOR,
    MAX_COLUMN_WIDTH,
    MIN_COLUMN_WIDTH,
    SUBMISSIONS_SHEET_NAME,
    WORKBOOK_SUFFIX,
)

_LOGGER = logging.getLogger(__name__)
_DESTINATION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_UNREADABLE_WORKBOOK_ERRORS = (OSError, InvalidFileException, zipfile.BadZipFile, KeyError)


class WorkbookStore:
    """Tabular store writing each destination to ``<directory>/<destination_id>.xlsx``.

    Every load-modify-save cycle holds ``<destination_id>.xlsx.lock``, which
    serializes writers across threads and processes. Saves go to a sibling
    temporary file that replaces the workbook in one rename, so readers
    never open a half-written file.
    """

    def __init__(
        self,
        directory: Path | str,
        *,
        id_factory: Callable[[], str] | None = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ):
        self._directory = Path(directory)
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._lock_timeout = lock_timeout

    @contextmanager
    def hold_destination(self, destination_id: str) -> Iterator[None]:
        """Hold the destination's cross-process lock; reentrant within one thread."""
        path = self._path_for(destination_id)
        lock = path_lock(path)
        try:
            lock.acquire(self._lock_timeout)
        except Timeout as exc:
            raise DestinationUnavailable(f"Timed out waiting for lock on {path}") from exc
        except OSError as exc:
            raise DestinationUnavailable(f"Failed to lock workbook {path}: {exc}") from exc
        try:
            yield
        finally:
            lock.release()

    def create(self, title: str, headers: Sequence[str]) -> DestinationHandle:
        destination_id = self._id_factory()
        path = self._path_for(destination_id)

        workbook = Workbook()
        sheet = workbook.active
        if sheet is None:
            raise DestinationCreateError("Workbook active sheet is not available.")
        assert isinstance(sheet, Worksheet)
        sheet.title = SUBMISSIONS_SHEET_NAME
        workbook.properties.title = title
        _write_header_row(sheet, headers)

        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DestinationCreateError(f"Failed to create workbook '{title}': {exc}") from exc
        try:
            with self.hold_destination(destination_id):
                if path.exists():
                    raise DestinationCreateError(f"Destination {destination_id} already exists.")
                atomic_replace(path, workbook.save)
        except DestinationCreateError:
            raise
        except (DestinationUnavailable, OSError) as exc:
            raise DestinationCreateError(f"Failed to create workbook '{title}': {exc}") from exc
        _LOGGER.debug("Created workbook %s titled %r", path, title)
        return DestinationHandle(destination_id=destination_id, url=path.resolve().as_uri())

    def set_headers(self, destination_id: str, headers: Sequence[str]) -> None:
        with self.hold_destination(destination_id):
            workbook = self._open(destination_id)
            sheet = _submissions_sheet(workbook)
            for column in range(len(headers) + 1, sheet.max_column + 1):
                sheet.cell(row=1, column=column).value = None
            _write_header_row(sheet, headers)
            self._save(workbook, destination_id)

    def get_headers(self, destination_id: str) -> list[str]:
        workbook = self._open(destination_id)
        sheet = _submissions_sheet(workbook)
        values = [cell.value for cell in sheet[1]]
        while values and values[-1] in (None, ""):
            values.pop()
        return ["" if value is None else str(value) for value in values]

    def append_rows(self, destination_id: str, rows: Sequence[Sequence[str]]) -> None:
        if not rows:
            return
        with self.hold_destination(destination_id):
            workbook = self._open(destination_id)
            sheet = _submissions_sheet(workbook)
            next_row = sheet.max_row + 1
            for offset, values in enumerate(rows):
                for column, value in enumerate(values, start=1):
                    _write_text_cell(sheet, next_row + offset, column, value)
            self._save(workbook, destination_id)

    def verify_exists(self, destination_id: str) -> bool:
        return self._path_for(destination_id).is_file()

    def _path_for(self, destination_id: str) -> Path:
        if not _DESTINATION_ID_PATTERN.fullmatch(destination_id):
            raise DestinationUnavailable(f"Invalid destination id: {destination_id!r}")
        return self._directory / f"{destination_id}{WORKBOOK_SUFFIX}"

    def _open(self, destination_id: str) -> Workbook:
        path = self._path_for(destination_id)
        if not path.is_file():
            raise DestinationMissing(f"Destination workbook not found: {path}")
        try:
            return load_workbook(path)
        except _UNREADABLE_WORKBOOK_ERRORS as exc:
            raise DestinationUnavailable(f"Failed to open workbook {path}: {exc}") from exc

    def _save(self, workbook: Workbook, destination_id: str) -> None:
        path = self._path_for(destination_id)
        try:
            atomic_replace(path, workbook.save)
        except OSError as exc:
            raise DestinationUnavailable(f"Failed to write workbook {path}: {exc}") from exc


def _submissions_sheet(workbook: Workbook) -> Worksheet:
    if SUBMISSIONS_SHEET_NAME in workbook.sheetnames:
        sheet = workbook[SUBMISSIONS_SHEET_NAME]
    else:
        sheet = workbook.active
    if not isinstance(sheet, Worksheet):
        raise DestinationUnavailable("Workbook has no submissions sheet.")
    return sheet


def _write_header_row(sheet: Worksheet, headers: Sequence[str]) -> None:
    header_font = Font(bold=True)
    header_fill = PatternFill(
        start_color=HEADER_FILL_COLOR, end_color=HEADER_FILL_COLOR, fill_type="solid"
    )
    for column_index, name in enumerate(headers, start=1):
        cell = _write_text_cell(sheet, 1, column_index, name)
        cell.font = header_font
        cell.fill = header_fill
        sheet.column_dimensions[get_column_letter(column_index)].width = max(
            MIN_COLUMN_WIDTH, min(len(name) + 6, MAX_COLUMN_WIDTH)
        )
    sheet.freeze_panes = "A2"


def _write_text_cell(sheet: Worksheet, row: int, column: int, value: object) -> Cell:
    text = "" if value is None else ILLEGAL_CHARACTERS_RE.sub("", str(value))
    cell = sheet.cell(row=row, column=column)
    cell.value = text or None
    if text.startswith("="):
        # Submitted text is stored literally, never evaluated as a formula.
        cell.data_type = "s"
    return cell
