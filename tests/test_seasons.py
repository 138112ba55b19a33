from __future__ import annotations

import pytest

from astroevents.config.settings import SearchCfg
from astroevents.events.results import Found, NotFound
from astroevents.events.seasons import Season, equinox_solstice


@pytest.mark.parametrize(
    ("season", "expected"),
    [
        (Season.MARCH_EQUINOX, 2451623.816),
        (Season.JUNE_SOLSTICE, 2451716.575),
        (Season.SEPTEMBER_EQUINOX, 2451810.228),
        (Season.DECEMBER_SOLSTICE, 2451900.067),
    ],
)
def test_seasons_of_2000(sun_provider, season: Season, expected: float) -> None:
    result = equinox_solstice(2000, season, sun_provider)
    assert isinstance(result, Found)
    assert result.jd == pytest.approx(expected, abs=0.05)
    assert result.details == {"season": season.value, "year": 2000}


def test_season_accepts_string(sun_provider):
    result = equinox_solstice(2000, "march_equinox", sun_provider, precision_seconds=60.0)
    assert result.found
    assert result.details["season"] == "march_equinox"


def test_precision_from_settings(sun_provider):
    coarse = equinox_solstice(2000, Season.JUNE_SOLSTICE, sun_provider, settings=SearchCfg(equinox_precision_seconds=3600.0))
    fine = equinox_solstice(2000, Season.JUNE_SOLSTICE, sun_provider, precision_seconds=0.1)
    assert coarse.jd == pytest.approx(fine.jd, abs=1.0 / 24.0)


def test_iteration_cap_reports_not_found(sun_provider):
    result = equinox_solstice(2000, Season.MARCH_EQUINOX, sun_provider, max_iter=1)
    assert isinstance(result, NotFound)
    assert "did not converge" in result.reason


def test_unknown_season_rejected(sun_provider):
    with pytest.raises(ValueError):
        equinox_solstice(2000, "midsummer", sun_provider)
