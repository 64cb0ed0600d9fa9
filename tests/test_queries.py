from webshare_stremio.models import ShowDescriptor
from webshare_stremio.services.queries import build_queries, query_titles


def test_series_queries_per_name_in_order():
    descriptor = ShowDescriptor.build("series", ["Perníkový táta", "Breaking Bad"], series="1", episode="3")
    queries = build_queries(descriptor)
    assert queries == [
        "Perníkový táta S01E03",
        "Perníkový táta 01x03",
        "Breaking Bad S01E03",
        "Breaking Bad 01x03",
    ]
    assert query_titles(queries, descriptor) == ["Perníkový táta", "Breaking Bad"]


def test_movie_queries_are_bare_names_without_duplicates():
    descriptor = ShowDescriptor.build("movie", ["Matrix", "Matrix", None, "The Matrix"], year="1999")
    assert build_queries(descriptor) == ["Matrix", "The Matrix"]


def test_movie_year_variant():
    descriptor = ShowDescriptor.build("movie", ["Eden", "Wonder Woman 1984"], year="2020")
    queries = build_queries(descriptor, include_year=True)
    assert queries == ["Eden", "Eden 2020", "Wonder Woman 1984"]
    assert query_titles(queries, descriptor) == ["Eden", "Wonder Woman 1984"]


def test_query_count_is_bounded_by_names():
    descriptor = ShowDescriptor.build("series", ["A", "B", "C"], series="2", episode="10")
    assert len(build_queries(descriptor)) <= 2 * len(descriptor.localized_names)
