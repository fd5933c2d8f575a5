"""
SQL statement classification.

Span names built from raw SQL would leak data and explode cardinality, so the
statement type is inferred from the leading keyword instead.
"""

import enum
import logging
import re
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


class StatementType(str, enum.Enum):
    SET_NAMES = "set names"
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    BEGIN = "begin"
    COMMIT = "commit"
    ROLLBACK = "rollback"
    SAVEPOINT = "savepoint"
    RELEASE_SAVEPOINT = "release savepoint"
    EXPLAIN = "explain"
    DROP_DATABASE = "drop database"
    DROP_TABLE = "drop table"
    CREATE_DATABASE = "create database"
    CREATE_TABLE = "create table"


# Order is significant: the first alternative that matches wins.
QUERY_NAMES = (
    "set names",
    "select",
    "insert",
    "update",
    "delete",
    "begin",
    "commit",
    "rollback",
    "savepoint",
    "release savepoint",
    "explain",
    "drop database",
    "drop table",
    "create database",
    "create table",
)


def compile_query_names(names: Sequence[str]) -> re.Pattern:
    """Build one anchored, case-insensitive alternation from ``names``."""
    alternation = "|".join(re.escape(name) for name in names)
    return re.compile(f"^({alternation})", re.IGNORECASE)


QUERY_NAME_RE = compile_query_names(QUERY_NAMES)


class StatementClassifier:
    """
    Maps a query to its StatementType, or None when unclassified.

    By default the keyword must start at the very first character of the
    query. ``allow_leading_whitespace`` skips leading whitespace first.
    """

    def __init__(self, allow_leading_whitespace: bool = False, pattern: re.Pattern = QUERY_NAME_RE):
        self.allow_leading_whitespace = allow_leading_whitespace
        self.pattern = pattern

    def classify(self, query) -> Optional[StatementType]:
        if not query:
            return None
        try:
            if self.allow_leading_whitespace:
                query = query.lstrip()
            match = self.pattern.match(query)
            if match is None:
                return None
            return StatementType(match.group(1).lower())
        except Exception as e:
            logger.debug(f"Error extracting sql statement type: {e}")
            return None


default_classifier = StatementClassifier()


def classify(query) -> Optional[StatementType]:
    """Classify ``query`` with the default, whitespace-strict classifier."""
    return default_classifier.classify(query)
