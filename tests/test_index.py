import logging

import pytest

from historical_geocoder.index import (
    QuerySyntaxError,
    TokenIndex,
    build_address_table,
    build_street_index,
)
from historical_geocoder.index.search import parse_query, QueryTerm
from historical_geocoder.utils.errors import MissingBoroughField

from conftest import address, street


@pytest.fixture
def token_index():
    return TokenIndex.build([
        (0, "5 AVE"),
        (1, "BLEECKER ST"),
        (2, "BROADWAY"),
        (3, "MADISON AVE"),
    ])


def test_parse_query_terms():
    assert parse_query("bleeker~2 ST") == [QueryTerm("bleeker", 2), QueryTerm("st", 0)]
    assert parse_query("   ") == []


@pytest.mark.parametrize("query", ["~2", "bro~x", "main~"])
def test_parse_query_rejects_malformed_fuzzy_suffix(query):
    with pytest.raises(QuerySyntaxError):
        parse_query(query)


def test_exact_term_matches_whole_tokens_only(token_index):
    assert [h.ref for h in token_index.search("ave")] == [0, 3]
    assert token_index.search("aves") == []
    assert token_index.search("AV") == []


def test_vocabulary_is_case_folded(token_index):
    assert token_index.vocabulary == frozenset({"5", "ave", "bleecker", "st", "broadway", "madison"})


def test_fuzzy_term_tolerates_edit_distance(token_index):
    assert [h.ref for h in token_index.search("bleeker~2")] == [1]
    assert [h.ref for h in token_index.search("brodwy~2")] == [2]
    assert token_index.search("brdwy~2") == []


def test_more_matching_terms_rank_higher(token_index):
    hits = token_index.search("madison~2 ave")
    assert [h.ref for h in hits] == [3, 0]
    assert hits[0].score > hits[1].score


def test_exact_match_outranks_fuzzy_match():
    index = TokenIndex.build([(0, "BROADWAX"), (1, "BROADWAY")])
    assert [h.ref for h in index.search("broadway~2")] == [1, 0]


def test_empty_query_has_no_results(token_index):
    assert token_index.search("") == []


def test_build_street_index_partitions_by_borough(street_index):
    assert set(street_index.boroughs) == {"Manhattan", "Brooklyn"}
    assert street_index.count == 5

    manhattan = street_index.get("Manhattan")
    assert [s.name for s in manhattan.streets] == ["5 AVE", "BLEECKER ST", "BROADWAY", "MADISON AVE"]
    assert [s.ref for s in manhattan.streets] == [0, 1, 2, 3]
    assert street_index.get("Brooklyn").streets[0].ref == 0


def test_street_index_search_unknown_borough_is_empty(street_index):
    assert "Queens" not in street_index
    assert street_index.search("broadway~2", "Queens") == []


def test_street_index_uses_given_normalizer():
    index = build_street_index([street("s1", "main st")], normalizer=str.upper)
    assert index.get("Manhattan").streets[0].name == "MAIN ST"


def test_street_index_normalizes_borough_aliases():
    index = build_street_index([street("s1", "Atlantic Avenue", borough="bk")])
    assert "Brooklyn" in index


def test_one_street_without_borough_aborts_the_build():
    rows = [street("s1", "Broadway"), {"id": "s2", "name": "Bowery", "data": {}}, street("s3", "Bond Street")]

    with pytest.raises(MissingBoroughField) as excinfo:
        build_street_index(rows)

    assert excinfo.value.record_id == "s2"
    assert "s2" in str(excinfo.value)


def test_build_street_index_logs_count(caplog, street_rows):
    caplog.set_level(logging.INFO, logger="historical_geocoder")
    build_street_index(street_rows)
    assert "Indexed 5 streets" in caplog.text


def test_build_address_table(address_table):
    assert address_table.count == 5
    found = address_table.get("350 5 AVE", "Manhattan")
    assert found.id == "a1"
    assert found.geometry == {"type": "Point", "coordinates": [-73.9857, 40.7484]}
    assert address_table.get("350 5 AVE", "Brooklyn") is None
    assert address_table.get("350 5 AVE", "Queens") is None


def test_address_table_last_duplicate_wins(caplog):
    caplog.set_level(logging.WARNING, logger="historical_geocoder")
    table = build_address_table([
        address("a1", "1 BROADWAY"),
        address("a2", "1 BROADWAY"),
        address("a3", "1 BROADWAY", borough="Brooklyn"),
    ])

    assert table.get("1 BROADWAY", "Manhattan").id == "a2"
    assert table.get("1 BROADWAY", "Brooklyn").id == "a3"
    assert table.overwritten == 1
    assert "1 addresses replaced" in caplog.text


def test_one_address_without_borough_aborts_the_build():
    rows = [address("a1", "1 BROADWAY"), {"id": "a2", "name": "2 BROADWAY"}]

    with pytest.raises(MissingBoroughField) as excinfo:
        build_address_table(rows)

    assert excinfo.value.record_id == "a2"


def test_address_table_is_read_only(address_table):
    with pytest.raises(TypeError):
        address_table.boroughs["Manhattan"]["2 BROADWAY"] = None
