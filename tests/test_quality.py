import pytest

from webshare_stremio.services.quality import (
    determine_resolution,
    estimate_speed_from_size,
    format_size,
    format_speed,
    resolution_priority,
)

GB = 1_000_000_000
MB = 1_000_000


def test_filename_hint_wins_over_everything():
    assert determine_resolution("Movie.1080p.mkv", 100, 3840, 2160) == "1080p"
    assert determine_resolution("Movie.4K.HDR.mkv", 100) == "2160p"
    assert determine_resolution("Movie.FHD.mkv", 100) == "1080p"
    assert determine_resolution("Clip.432x240.avi", 100) == "432x240"


def test_api_dimensions_then_size():
    assert determine_resolution("Movie.mkv", 100, 1920, 1080) == "1080p"
    assert determine_resolution("Movie.mkv", 100, 320, 240) == "320x240"
    assert determine_resolution("Movie.mkv", int(3.1 * GB)) == "1080p"
    assert determine_resolution("Movie.mkv", 600 * MB) == "480p"
    assert determine_resolution("Movie.mkv", 9 * GB) == "2160p"
    assert determine_resolution("Movie.mkv", 2 * GB) == "720p"
    assert determine_resolution("Movie.mkv", 100 * MB) == "SD"


def test_hd_needs_token_boundaries():
    assert determine_resolution("Movie.HDR.mkv", 100) == "SD"


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("Film1080p.mkv", "1080p"),
        ("Movie.1080pHEVC.mkv", "1080p"),
        ("Movie_x265-1080pCZ.mkv", "1080p"),
        ("Movie.2160pHDR.mkv", "2160p"),
        ("Movie.720pCZdabing.avi", "720p"),
        ("Movie.UHDRip.mkv", "2160p"),
    ],
)
def test_resolution_tokens_glued_to_other_text(filename, expected):
    assert determine_resolution(filename, 100) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("2160p", 10),
        ("4k", 10),
        ("1440p", 9),
        ("1080p", 8),
        ("720p", 7),
        ("480p", 6),
        ("360p", 5),
        ("1920x1080", 8),
        ("432x240", 4),
        ("SD", 1),
        (None, 0),
    ],
)
def test_resolution_priority(label, expected):
    assert resolution_priority(label) == expected


def test_speed_hints():
    assert format_speed(5_400_000) == "6.5 Mbps"
    assert format_speed(10_000_000) == "12 Mbps"
    assert format_speed(None) is None
    assert estimate_speed_from_size(9 * GB) == "25 Mbps"
    assert estimate_speed_from_size(5 * GB) == "15 Mbps"
    assert estimate_speed_from_size(3 * GB) == "10 Mbps"
    assert estimate_speed_from_size(int(1.5 * GB)) == "8 Mbps"
    assert estimate_speed_from_size(600 * MB) == "5 Mbps"
    assert estimate_speed_from_size(300 * MB) == "3 Mbps"
    assert estimate_speed_from_size(10 * MB) == "2 Mbps"


def test_format_size():
    assert format_size(30 * GB) == "30 GB"
    assert format_size(180 * MB) == "180 MB"
    assert format_size(int(2.5 * GB)) == "2.5 GB"
    assert format_size(GB) == "1 GB"
    assert format_size(0) == "0 B"
