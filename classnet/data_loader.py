# survey csv -> student names + raw relationships (same shape the oracle returns)
# this is the fallback path when we dont go through the oracle, no name cleanup here

import io
import re
import csv
import logging
import pandas as pd # pyright: ignore[reportMissingImports]
from classnet.constants import (
    RESPONDENT_KEYWORDS, EXCLUDE_KEYWORDS, METADATA_KEYWORDS,
    QUESTION_TYPE_KEYWORDS, MULTI_VALUE_SPLIT, DEFAULT_RELATION_TYPE,
    CSV_ENCODINGS,
)

logger = logging.getLogger(__name__)


class SurveyFormatError(ValueError):
    pass


def find_respondent_column(columns):
    for col in columns:
        if any(k in col.lower() for k in RESPONDENT_KEYWORDS):
            return col
    # nothing looks like a name column, first one is usually it anyway
    return columns[0] if columns else None


def find_relationship_columns(columns, respondent_column):
    return [
        col for col in columns
        if col != respondent_column
        and not any(k in col.lower() for k in EXCLUDE_KEYWORDS)
        and not any(k in col.lower() for k in METADATA_KEYWORDS)
    ]


def infer_relationship_type(column: str) -> str:
    lower = column.lower()
    for keyword, rel in QUESTION_TYPE_KEYWORDS:
        if keyword in lower:
            return rel
    return DEFAULT_RELATION_TYPE


def split_cell(value) -> list:
    if value is None:
        return []
    return [part.strip() for part in re.split(MULTI_VALUE_SPLIT, str(value)) if part.strip()]


def decode_survey(raw: bytes) -> str:
    # google forms exports utf-8, korean excel saves cp949
    error = None
    for encoding in CSV_ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError as e:
            error = e
    raise SurveyFormatError(f"csv file is not {' or '.join(CSV_ENCODINGS)} text") from error


def _unique_columns(header) -> list:
    # repeated question text becomes "Q", "Q.1", ... like pandas does
    seen = {}
    out = []
    for col in (str(c).strip() for c in header):
        n = seen.get(col, 0)
        seen[col] = n + 1
        out.append(col if n == 0 else f"{col}.{n}")
    return out


class SurveyLoader:

    def __init__(self, filepath: str = None):

        self.filepath = filepath
        self.rows = []
        self.columns = []
        self.respondent_column = None
        self.relationship_columns = []

        self.students = []         # first-seen order, no dupes
        self.relationships = []    # {'from', 'to', 'type', 'weight'}

    @classmethod
    def from_text(cls, text: str) -> 'SurveyLoader':
        loader = cls()
        loader._read(text)
        return loader

    @classmethod
    def from_rows(cls, rows) -> 'SurveyLoader':
        loader = cls()
        loader._set_rows([{str(k).strip(): v for k, v in row.items()} for row in rows])
        return loader

    def load(self):

        with open(self.filepath, 'rb') as f:
            raw = f.read()

        self._read(decode_survey(raw))
        return self.extract()

    def _read(self, text: str):

        try:
            records = [
                r for r in csv.reader(io.StringIO(text.lstrip('\ufeff')))
                if any(cell.strip() for cell in r)
            ]
        except csv.Error as e:
            raise SurveyFormatError(f"could not parse csv: {e}") from e

        if not records:
            raise SurveyFormatError("csv file is empty")

        header = _unique_columns(records[0])
        width = len(header)

        body = []
        for i, record in enumerate(records[1:], start=1):
            if len(record) > width:
                # an unquoted "Bob, Carol" spills into extra fields, merge them back into the last cell
                logger.warning("row %d has %d fields, expected %d; extra fields merged into %r",
                               i, len(record), width, header[-1])
                record = record[:width - 1] + [', '.join(record[width - 1:])]
            body.append(record + [''] * (width - len(record)))

        df = pd.DataFrame(body, columns=header, dtype=str)
        self._set_rows(df.to_dict('records'))

    def _set_rows(self, rows):

        self.rows = rows
        self.columns = list(rows[0].keys()) if rows else []
        self.respondent_column = find_respondent_column(self.columns)
        self.relationship_columns = find_relationship_columns(self.columns, self.respondent_column)

    def validate(self):

        if not self.rows:
            raise SurveyFormatError("csv file is empty")
        if len(self.columns) < 2:
            raise SurveyFormatError("need at least 2 columns")
        if not self.relationship_columns:
            raise SurveyFormatError("could not find any relationship question columns")

    def extract(self):

        self.validate()

        seen = set()
        self.students = []
        self.relationships = []

        def add_student(name):
            if name not in seen:
                seen.add(name)
                self.students.append(name)

        for row in self.rows:
            source = str(row.get(self.respondent_column) or '').strip()
            if not source:
                continue
            add_student(source)

            for col in self.relationship_columns:
                rel = infer_relationship_type(col)
                for target in split_cell(row.get(col)):
                    if target == source:
                        continue
                    add_student(target)
                    self.relationships.append({'from': source, 'to': target, 'type': rel, 'weight': 1})

        return self.students, self.relationships

    def raw_name_set(self) -> set:

        # every name string that appears anywhere, respondents + nominees
        # oracle quality check compares its canonical names against this

        names = set()
        for row in self.rows:
            respondent = str(row.get(self.respondent_column) or '').strip()
            if respondent:
                names.add(respondent)
            for col in self.relationship_columns:
                names.update(split_cell(row.get(col)))
        return names

    def respondent_count(self) -> int:
        return len({
            str(row.get(self.respondent_column) or '').strip()
            for row in self.rows
        } - {''})
