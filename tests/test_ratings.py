import pytest

from showreel.services.ratings import content_rating


@pytest.mark.parametrize(
    "genre_ids, media_type, expected",
    [
        ({27, 16}, "movie", "18+"),
        ({16, 12}, "movie", "All"),
        ({12}, "movie", "18+"),
        (set(), "movie", "18+"),
        ({80, 35}, "tv", "18+"),
        ({10768}, "tv", "18+"),
        ({10762}, "tv", "All"),
        ({18, 9648}, "tv", "All"),
        ({10765}, "tv", "18+"),
    ],
)
def test_content_rating(genre_ids, media_type, expected):
    assert content_rating(genre_ids, media_type) == expected


def test_unknown_media_type():
    with pytest.raises(ValueError):
        content_rating({18}, "podcast")
