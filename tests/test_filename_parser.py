import pytest

from webshare_stremio.models import SeasonEpisode
from webshare_stremio.services.filename_parser import (
    LANGUAGE_STRATEGIES,
    SEASON_EPISODE_STRATEGIES,
    extract_language,
    extract_season_episode,
    parse_filename,
)


@pytest.mark.parametrize(
    "filename",
    [
        "Movie.CZ.EN.mkv",
        "Movie.EN.CZ.mkv",
        "The.LongTrain.1999.1080p.BluRay.x264-[YTS.AG].CZ.EN.mkv",
        "The.LongTrain.1999.1080p.BluRay.x264-[YTS.AG].EN.CZ.mkv",
        "Movie (CZ, EN).avi",
        "Movie CZ EN 720p.avi",
        "Movie.CZE-ENG.1080p.mkv",
    ],
)
def test_two_codes_are_sorted_and_joined(filename):
    assert extract_language(filename) == "CZ|EN"


def test_single_codes_and_variants():
    assert extract_language("The.LongTrain.1999.1080p.BluRay.x264-[YTS.AG].CZ.mkv") == "CZ"
    assert extract_language("The.LongTrain.1999.1080p.BluRay.x264-[YTS.AG].EN.mkv") == "EN"
    assert extract_language("Pelisky [SK].avi") == "SK"
    assert extract_language("Movie.2010.DUAL-CZ.mp4") == "CZ"
    assert extract_language("Movie.2010.Czech.720p.mkv") == "CZ"


def test_no_language_inside_ordinary_words():
    assert extract_language("The.LongTrain.1999.1080p.BluRay.x264-[YTS.AG].mkv") is None
    assert extract_language("Encanto.2021.1080p.mkv") is None
    assert extract_language("Subway.1985.mkv") is None
    assert extract_language("") is None
    assert extract_language(None) is None


def test_keyword_decides_audio_or_subtitles():
    assert extract_language("Film CZ titulky.avi") == "CZ titulky"
    assert extract_language("Film dabing EN.avi") == "EN"
    assert extract_language("Film.CZsub.mkv") == "CZ titulky"
    assert extract_language("Film.CZdub.mkv") == "CZ"


def test_language_strategy_order_is_explicit():
    names = [strategy.__name__ for strategy in LANGUAGE_STRATEGIES]
    assert names == [
        "_comma_separated",
        "_whitespace_separated",
        "_keyword_adjacent",
        "_keyword_concatenated",
        "_positional",
    ]


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("Show.S01E03.mkv", SeasonEpisode(1, 3)),
        ("Show.s10e12.720p.mkv", SeasonEpisode(10, 12)),
        ("Show S123E045.mkv", SeasonEpisode(123, 45)),
        ("720p S01 E03 Miracle man.avi", SeasonEpisode(1, 3)),
        ("Show 1x03.avi", SeasonEpisode(1, 3)),
        ("Harry Potter and the Deathly Hallows - 01x14 (2160p).mkv", SeasonEpisode(1, 14)),
        ("Show Season 2 Episode 5.avi", SeasonEpisode(2, 5)),
        ("Show Episode 7.avi", SeasonEpisode(1, 7)),
        ("Show Ep 4.avi", SeasonEpisode(1, 4)),
        ("Show #9.avi", SeasonEpisode(1, 9)),
        ("Movie Part 2.avi", SeasonEpisode(1, 2)),
        ("Movie.Pt.3.avi", SeasonEpisode(1, 3)),
    ],
)
def test_extract_season_episode(filename, expected):
    assert extract_season_episode(filename) == expected


@pytest.mark.parametrize(
    "filename",
    [
        "The.Relic.1999.2160p.UHD.BluRay.x265.10bit.HDR.DTS-HD.MA.5.1-SWTYBLZ.mkv",
        "Star.Wars.Episode.I.Phantom.Menace.1999.720p.BluRay.AC3.5.1.x264-JPN.mp4",
        "Clip.432x240.avi",
        "Movie.101.Dalmatians.avi",
        "",
    ],
)
def test_no_season_episode(filename):
    assert extract_season_episode(filename) is None


def test_structured_pattern_wins_over_part_marker():
    assert extract_season_episode("Show Part 1 S02E05.mkv") == SeasonEpisode(2, 5)
    assert [s.__name__ for s in SEASON_EPISODE_STRATEGIES] == ["_standard", "_episode_only", "_part"]


def test_parse_filename_combines_release_info():
    parsed = parse_filename("The.Relic.1999.1080p.BluRay.x264-[YTS.AG].CZ.mkv")
    assert parsed.title == "The Relic"
    assert parsed.year == 1999
    assert parsed.resolution == "1080p"
    assert parsed.language == "CZ"
    assert parsed.season_episode is None


def test_parse_filename_never_raises_on_odd_input():
    parsed = parse_filename("???")
    assert parsed.title
    assert parsed.season is None
    assert parsed.language is None


def test_numeric_season_form_takes_at_most_two_digits():
    # "432x240" style resolutions must not read as episodes
    assert extract_season_episode("Show 100x05.mkv") is None
    assert extract_season_episode("Show 12x05.mkv") == SeasonEpisode(12, 5)
    assert extract_season_episode("Show S100E05.mkv") == SeasonEpisode(100, 5)
