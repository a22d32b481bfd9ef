"""
Query filter helpers

Case-insensitive substring filters for free-text `search`/`q` parameters.
User input is matched literally: LIKE wildcards in it are escaped, and list
columns (JSONList) are matched element by element rather than on their
serialized JSON text.
"""
from typing import Optional

from sqlalchemy import String, column, or_, select
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.functions import FunctionElement

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape the LIKE metacharacters (%, _ and the escape char itself)"""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def like_pattern(term: str) -> str:
    return f"%{escape_like(term.strip())}%"


def contains(col, term: str) -> ColumnElement:
    """`col` contains `term`, ignoring case"""
    return col.ilike(like_pattern(term), escape=LIKE_ESCAPE)


class json_list_elements(FunctionElement):
    """Table-valued function yielding the elements of a JSON array column as text"""
    name = "json_list_elements"
    inherit_cache = True


@compiles(json_list_elements)
def _json_list_elements_sqlite(element, compiler, **kw):
    return "json_each(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_list_elements, "postgresql")
def _json_list_elements_postgresql(element, compiler, **kw):
    return "json_array_elements_text(%s)" % compiler.process(element.clauses, **kw)


def list_contains(col, term: str) -> ColumnElement:
    """Some element of the JSON list column `col` contains `term`, ignoring case"""
    elements = json_list_elements(col).table_valued(column("value", String))
    return select(elements.c.value).where(contains(elements.c.value, term)).exists()


def search_filter(term: Optional[str], *columns, list_columns=()) -> Optional[ColumnElement]:
    """
    OR of `contains` over `columns` and `list_contains` over `list_columns`.

    Returns None for a blank term so callers can skip the WHERE clause.
    """
    if not term or not term.strip():
        return None
    clauses = [contains(c, term) for c in columns]
    clauses.extend(list_contains(c, term) for c in list_columns)
    return or_(*clauses)
