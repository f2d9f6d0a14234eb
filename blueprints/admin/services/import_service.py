"""
Spreadsheet import service.
Reads equipment and company lists from CSV or Excel uploads and hands the
rows to the bulk upsert functions.
"""

import csv
import io
import logging
import os
from zipfile import BadZipFile
from typing import Any, Dict, List, Tuple

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from models.company import bulk_upsert_companies
from models.equipment import FIELD_ALIASES, bulk_upsert_equipment
from models.errors import ValidationError, failure
from utils.messages import get_message

logger = logging.getLogger(__name__)

# Headers an equipment file must carry (imageUrl / calibrationDueDate optional)
EQUIPMENT_REQUIRED_HEADERS = ('gageId', 'description', 'manufacturer', 'model', 'range', 'uom')

COMPANY_REQUIRED_HEADERS = ('name',)


def allowed_file(filename: str, allowed_extensions=('csv', 'xlsx')) -> bool:
    """Check the upload has one of the allowed extensions."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in allowed_extensions


def _cell_text(value):
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    return value


def read_csv_rows(stream) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read a CSV file into header list and row dicts.

    Args:
        stream: Binary or text file object

    Returns:
        Tuple of (headers, rows); blank rows are skipped
    """
    content = stream.read()
    if isinstance(content, bytes):
        content = content.decode('utf-8-sig')

    reader = csv.DictReader(io.StringIO(content, newline=''))
    headers = [h.strip() for h in (reader.fieldnames or []) if h]
    rows = []
    for raw in reader:
        row = {str(k).strip(): _cell_text(v) for k, v in raw.items() if k}
        if not any(v not in (None, '') for v in row.values()):
            continue
        rows.append(row)
    return headers, rows


def read_xlsx_rows(stream) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read the active sheet of an Excel workbook.

    The first row is the header row. Blank rows are skipped.
    """
    wb = openpyxl.load_workbook(io.BytesIO(stream.read()), data_only=True, read_only=True)
    try:
        sheet = wb.active
        values = sheet.iter_rows(values_only=True)
        header_row = next(values, None) or ()
        headers = [str(h).strip() if h is not None else '' for h in header_row]

        rows = []
        for row_values in values:
            if not any(v not in (None, '') for v in row_values):
                continue
            rows.append({
                header: _cell_text(value)
                for header, value in zip(headers, row_values)
                if header
            })
    finally:
        wb.close()
    return [h for h in headers if h], rows


def read_rows(stream, filename: str) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read an uploaded file by extension.

    Raises:
        ValidationError: Unsupported extension or unreadable content
    """
    extension = os.path.splitext(filename)[1].lower().lstrip('.')
    try:
        if extension == 'csv':
            return read_csv_rows(stream)
        if extension == 'xlsx':
            return read_xlsx_rows(stream)
    except (UnicodeDecodeError, csv.Error, BadZipFile, InvalidFileException, OSError, KeyError, ValueError) as e:
        logger.info(f'Unreadable import file {filename}: {e}')
        raise ValidationError(get_message('unreadable_file'))
    raise ValidationError(get_message('invalid_file_type', extensions='csv, xlsx'))


def missing_headers(headers: List[str], required, aliases=None) -> List[str]:
    """Required headers absent from the file (case-insensitive, aliases allowed)."""
    aliases = aliases or {}

    def canonical(header):
        key = str(header).strip().lower()
        return aliases.get(key, key)

    present = {canonical(h) for h in headers}
    return [h for h in required if canonical(h) not in present]


def validate_import_file(stream, filename: str, required, aliases=None) -> List[Dict[str, Any]]:
    """
    Read a file and check its headers.

    Returns:
        List of row dicts

    Raises:
        ValidationError: Unreadable file or missing required headers
    """
    headers, rows = read_rows(stream, filename)
    missing = missing_headers(headers, required, aliases)
    if missing:
        raise ValidationError(
            get_message('import_missing_headers', headers=', '.join(missing)),
            missing_headers=missing,
        )
    return rows


def import_equipment_file(store, stream, filename: str) -> Dict[str, Any]:
    """
    Import equipment from a CSV or Excel file.

    Returns:
        Result dict from bulk_upsert_equipment, plus 'total' rows read
    """
    try:
        rows = validate_import_file(stream, filename, EQUIPMENT_REQUIRED_HEADERS, FIELD_ALIASES)
    except ValidationError as e:
        return failure(e)

    result = bulk_upsert_equipment(store, rows)
    result['total'] = len(rows)
    logger.info(f'Imported equipment file {filename}: {len(rows)} rows')
    return result


def import_companies_file(store, stream, filename: str) -> Dict[str, Any]:
    """Import companies from a CSV or Excel file with a 'name' column."""
    try:
        rows = validate_import_file(stream, filename, COMPANY_REQUIRED_HEADERS)
    except ValidationError as e:
        return failure(e)

    rows = [{'name': _value_for(row, 'name')} for row in rows]
    result = bulk_upsert_companies(store, rows)
    result['total'] = len(rows)
    return result


def _value_for(row: Dict[str, Any], header: str):
    for key, value in row.items():
        if str(key).strip().lower() == header:
            return value
    return None
