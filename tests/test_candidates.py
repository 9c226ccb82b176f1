import json
import random
from pathlib import Path

from tourgen.candidates import assemble_candidates, pick_assembler
from tourgen.models import parse_catalog
from tourgen.selection import WILDCARD, TourSelection


def load_catalog_fixture():
    path = Path(__file__).parent / "fixtures" / "catalog.json"
    with open(path, "r", encoding="utf-8") as f:
        return parse_catalog(json.load(f))


def make_selection(artists, artworks, neighborhood="mitte"):
    selection = TourSelection(neighborhood_id=neighborhood, duration_min=60)
    for item in artists:
        selection.toggle_artist(item)
    for item in artworks:
        selection.toggle_artwork(item)
    return selection


def test_catalog_skips_unlocated_artworks():
    catalog = load_catalog_fixture()
    assert len(catalog.artworks_in("mitte")) == 8
    assert all(art.id != "x1" for art in catalog.artworks)


def test_both_wildcards_draw_from_whole_neighborhood():
    catalog = load_catalog_fixture()
    selection = make_selection([WILDCARD], [WILDCARD])
    stops = assemble_candidates(selection, catalog, 10, random.Random(1))
    assert sorted(stop.id for stop in stops) == ["s1", "s2", "s3", "s4", "s5", "s6", "s7", "s8"]


def test_pool_is_truncated_to_budget():
    catalog = load_catalog_fixture()
    selection = make_selection([WILDCARD], [WILDCARD])
    stops = assemble_candidates(selection, catalog, 3, random.Random(1))
    assert len(stops) == 3
    assert {stop.id for stop in stops} <= {"s1", "s2", "s3", "s4", "s5", "s6", "s7", "s8"}


def test_same_seed_same_shuffle():
    catalog = load_catalog_fixture()
    selection = make_selection([WILDCARD], [WILDCARD])
    first = assemble_candidates(selection, catalog, 8, random.Random(7))
    second = assemble_candidates(selection, catalog, 8, random.Random(7))
    assert [s.id for s in first] == [s.id for s in second]


def test_artist_wildcard_uses_explicit_artworks():
    catalog = load_catalog_fixture()
    selection = make_selection([WILDCARD], ["s2", "s5", "w1"])
    stops = assemble_candidates(selection, catalog, 10, random.Random(3))
    # w1 is in another neighborhood.
    assert sorted(stop.id for stop in stops) == ["s2", "s5"]


def test_artwork_wildcard_uses_explicit_artists():
    catalog = load_catalog_fixture()
    selection = make_selection(["a1"], [WILDCARD])
    stops = assemble_candidates(selection, catalog, 10, random.Random(3))
    assert sorted(stop.id for stop in stops) == ["s1", "s4", "s7"]
    assert {stop.artist for stop in stops} == {"Kera"}


def test_explicit_picks_keep_confirmed_order_without_truncation():
    catalog = load_catalog_fixture()
    selection = make_selection(["a1"], ["s7", "s1"])
    artists = catalog.artists_by_id()
    by_id = {art.id: art for art in catalog.artworks}
    from tourgen.models import Stop

    confirmed = [Stop.from_artwork(by_id[i], artists) for i in ("s7", "s4", "s1")]
    selection.confirm_stops(confirmed)

    stops = assemble_candidates(selection, catalog, 2, random.Random(3))
    assert [stop.id for stop in stops] == ["s7", "s4", "s1"]
    assert pick_assembler(selection).__name__ == "confirmed_stops"


def test_empty_neighborhood_yields_no_candidates():
    catalog = load_catalog_fixture()
    selection = make_selection([WILDCARD], [WILDCARD], neighborhood="nowhere")
    assert assemble_candidates(selection, catalog, 10, random.Random(1)) == []
