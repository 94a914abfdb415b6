import pytest

from PLEXPORT.server.services.explorer.assembler import (
    assemble_query,
    clamp_limit,
    clamp_offset,
    compute_has_more,
    normalize_direction,
)
from PLEXPORT.server.services.explorer.filters import CompiledFilters


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 50), ("", 50), ("abc", 50), (0, 1), (-5, 1), (25, 25), ("30", 30), ("40rows", 40), (12.9, 12), (5000, 200), (True, 50)],
)
def test_clamp_limit(raw, expected) -> None:
    assert clamp_limit(raw, default=50, maximum=200) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 0), ("nope", 0), (-10, 0), (0, 0), (75, 75), ("100", 100)],
)
def test_clamp_offset(raw, expected) -> None:
    assert clamp_offset(raw) == expected


def test_normalize_direction_defaults_to_ascending() -> None:
    assert normalize_direction("desc") == "DESC"
    assert normalize_direction(" DESC ") == "DESC"
    assert normalize_direction("asc") == "ASC"
    assert normalize_direction("sideways") == "ASC"
    assert normalize_direction(None) == "ASC"


def test_has_more_arithmetic() -> None:
    assert compute_has_more(0, 50, 150)
    assert compute_has_more(50, 50, 150)
    assert not compute_has_more(100, 50, 150)
    assert not compute_has_more(200, 0, 150)


def test_assemble_query_without_filters() -> None:
    assembled = assemble_query("media", ["id", "title"], CompiledFilters(), None, "ASC", 10, 20)

    assert assembled.sql == 'SELECT "id", "title" FROM "media" LIMIT :limit OFFSET :offset'
    assert assembled.count_sql == 'SELECT COUNT(*) AS count FROM "media"'
    assert assembled.params == {"limit": 10, "offset": 20}
    assert assembled.count_params == {}


def test_assemble_query_mirrors_where_clause_in_count() -> None:
    compiled = CompiledFilters()
    compiled.predicates.append(f'"year" = {compiled.bind(2020)}')

    assembled = assemble_query("media", ["title"], compiled, "title", "DESC", 5, 0)

    assert assembled.sql == (
        'SELECT "title" FROM "media" WHERE "year" = :p0 '
        'ORDER BY "title" DESC LIMIT :limit OFFSET :offset'
    )
    assert assembled.count_sql == 'SELECT COUNT(*) AS count FROM "media" WHERE "year" = :p0'
    assert assembled.params == {"p0": 2020, "limit": 5, "offset": 0}
    assert assembled.count_params == {"p0": 2020}
    assert "ORDER BY" not in assembled.count_sql
    assert "LIMIT" not in assembled.count_sql
