import pytest

from tablescout.config.settings import get_settings
from tablescout.core.geo import Coordinate, InvalidCoordinateError
from tablescout.core.regions import Region, classify_region, is_within_bounds

GOTIC = Region(name="Barri Gòtic", lng_min=2.17, lng_max=2.18, lat_min=41.37, lat_max=41.39)
CITY = Region(name="Barcelona", lng_min=2.05, lng_max=2.30, lat_min=41.30, lat_max=41.50)


def test_classify_single_region_and_empty_list():
    c = Coordinate(lng=2.1752, lat=41.3834)
    assert classify_region(c, [GOTIC]) == "Barri Gòtic"
    assert classify_region(c, []) is None


@pytest.mark.parametrize(
    "lng,lat",
    [
        (2.17, 41.37),
        (2.18, 41.39),
        (2.17, 41.39),
        (2.18, 41.37),
        (2.175, 41.37),
        (2.18, 41.38),
    ],
)
def test_bounds_are_inclusive_on_every_edge(lng, lat):
    c = Coordinate(lng=lng, lat=lat)
    assert is_within_bounds(c, GOTIC)
    assert classify_region(c, [GOTIC]) == "Barri Gòtic"


def test_point_just_outside_is_not_inside():
    assert not is_within_bounds(Coordinate(lng=2.1801, lat=41.38), GOTIC)
    assert classify_region(Coordinate(lng=2.1801, lat=41.38), [GOTIC]) is None


def test_first_matching_region_wins():
    c = Coordinate(lng=2.1752, lat=41.3834)
    assert classify_region(c, [GOTIC, CITY]) == "Barri Gòtic"
    assert classify_region(c, [CITY, GOTIC]) == "Barcelona"


def test_catch_all_region_placed_last_labels_the_rest_of_the_city():
    outside_gotic = Coordinate(lng=2.10, lat=41.35)
    assert classify_region(outside_gotic, [GOTIC, CITY]) == "Barcelona"
    assert classify_region(Coordinate(lng=-3.70, lat=40.41), [GOTIC, CITY]) is None


def test_classification_is_deterministic_and_does_not_mutate():
    regions = [GOTIC, CITY]
    before = list(regions)
    c = Coordinate(lng=2.1752, lat=41.3834)
    assert classify_region(c, regions) == classify_region(c, regions)
    assert regions == before


def test_default_neighborhoods_use_configured_priority():
    regions = get_settings().geo.region_list()
    # Carrer del Call sits in both the Eixample and Gothic boxes; Eixample is listed first.
    assert classify_region(Coordinate(lng=2.1752, lat=41.3834), regions) == "L'Eixample"
    assert classify_region(Coordinate(lng=2.1885, lat=41.3792), regions) == "La Barceloneta"
    assert classify_region(Coordinate(lng=2.1663, lat=41.3644), regions) == "Barcelona"
    assert regions[-1].name == "Barcelona"


def test_region_rejects_inverted_bounds():
    with pytest.raises(ValueError, match="lng_min"):
        Region(name="bad", lng_min=2.2, lng_max=2.1, lat_min=41.0, lat_max=41.1)
    with pytest.raises(ValueError, match="lat_min"):
        Region(name="bad", lng_min=2.1, lng_max=2.2, lat_min=41.2, lat_max=41.1)


def test_invalid_coordinate_raises_in_classifier():
    with pytest.raises(InvalidCoordinateError):
        classify_region(Coordinate(lng=2.17, lat=95.0), [GOTIC])
    with pytest.raises(InvalidCoordinateError):
        is_within_bounds(Coordinate(lng=190.0, lat=41.38), CITY)


def test_classify_validates_the_point_once_for_all_regions(monkeypatch):
    import tablescout.core.regions as regions_module

    calls = []
    real_validate = regions_module.validate_coordinate

    def counting_validate(c):
        calls.append(c)
        return real_validate(c)

    monkeypatch.setattr(regions_module, "validate_coordinate", counting_validate)
    boxes = [Region(name=f"box-{i}", lng_min=0, lng_max=1, lat_min=0, lat_max=1) for i in range(5)]
    assert classify_region(Coordinate(lng=5, lat=5), boxes) is None
    assert len(calls) == 1
