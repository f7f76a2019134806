import pytest

from playoff_bracket.matchup import (
    Alliance,
    AllianceSource,
    BracketError,
    Match,
    MatchStatus,
    MatchStore,
    Matchup,
    MatchupKey,
    MatchupTemplate,
    loser_source,
    winner_source,
)

ELIM = "elimination"


def lineup(alliance_id):
    base = 100 * alliance_id
    return (base + 2, base + 1, base + 3)


def make_store(num_alliances):
    store = MatchStore()
    for i in range(1, num_alliances + 1):
        store.create_alliance(Alliance(id=i, team_ids=[100 * i + n for n in (1, 2, 3)], lineup=lineup(i)))
    return store


def elim_matches(store):
    return store.get_matches_by_type(ELIM)


def set_status(store, *results):
    for name, status in results:
        match = store.get_match_by_name(ELIM, name)
        match.status = status
        store.update_match(match)


def check_match(match, name, red, blue):
    assert (match.display_name, match.elim_red_alliance, match.elim_blue_alliance) == (name, red, blue)
    assert (match.red1, match.red2, match.red3) == lineup(red)
    assert (match.blue1, match.blue2, match.blue3) == lineup(blue)


def best_of_three_final():
    return Matchup(MatchupTemplate(MatchupKey(1, 1), "F", 2), red_alliance_id=1, blue_alliance_id=2)


@pytest.mark.parametrize(
    "key,name,wins,instance,expected",
    [
        (MatchupKey(6, 1), "F", 2, 1, "F-1"),
        (MatchupKey(5, 1), "13", 1, 1, "13"),
        (MatchupKey(5, 1), "13", 1, 2, "13-2"),
        (MatchupKey(3, 2), "SF2", 2, 1, "SF2-1"),
        (MatchupKey(3, 2), "SF2", 2, 3, "SF2-3"),
    ],
)
def test_match_display_names(key, name, wins, instance, expected):
    assert MatchupTemplate(key, name, wins).match_display_name(instance) == expected


@pytest.mark.parametrize(
    "name,wins,expected",
    [("F", 2, "Finals"), ("13", 1, "Match 13"), ("SF2", 2, "SF2")],
)
def test_long_display_names(name, wins, expected):
    assert Matchup(MatchupTemplate(MatchupKey(1, 1), name, wins)).long_display_name() == expected


def test_source_display_names():
    m11 = Matchup(MatchupTemplate(MatchupKey(4, 1), "11", 1))
    m12 = Matchup(MatchupTemplate(MatchupKey(4, 2), "12", 1))
    m13 = Matchup(
        MatchupTemplate(MatchupKey(5, 1), "13", 1, loser_source(4, 2), winner_source(4, 1)),
        red_source_matchup=m12,
        blue_source_matchup=m11,
    )
    final = Matchup(
        MatchupTemplate(MatchupKey(6, 1), "F", 2, winner_source(4, 2), winner_source(5, 1)),
        red_source_matchup=m12,
        blue_source_matchup=m13,
    )
    expected = {final: ("W 12", "W 13"), m13: ("L 12", "W 11"), m11: ("", "")}
    for matchup, names in expected.items():
        assert (matchup.red_alliance_source_display_name(), matchup.blue_alliance_source_display_name()) == names


@pytest.mark.parametrize(
    "name,wins,red,blue,expected",
    [
        ("", 1, 0, 0, ("", "")),
        ("", 1, 1, 0, ("red", "Red Advances 1-0")),
        ("", 1, 0, 2, ("blue", "Blue Advances 2-0")),
        ("", 3, 0, 2, ("blue", "Blue Leads 2-0")),
        ("", 3, 2, 2, ("", "Series Tied 2-2")),
        ("", 3, 2, 1, ("red", "Red Leads 2-1")),
        ("F", 3, 3, 1, ("red", "Red Wins 3-1")),
        ("F", 3, 2, 4, ("blue", "Blue Wins 4-2")),
        ("F", 3, 0, 0, ("", "")),
    ],
)
def test_status_text(name, wins, red, blue, expected):
    template = MatchupTemplate(key=MatchupKey(1, 1), display_name=name, num_wins_to_advance=wins)
    matchup = Matchup(template, red_alliance_wins=red, blue_alliance_wins=blue)
    assert matchup.status_text() == expected


def test_winner_and_loser():
    template = MatchupTemplate(key=MatchupKey(1, 1), num_wins_to_advance=2)
    matchup = Matchup(template, red_alliance_id=3, blue_alliance_id=6, red_alliance_wins=1, blue_alliance_wins=1)
    assert (matchup.winner(), matchup.loser(), matchup.is_complete()) == (0, 0, False)
    matchup.blue_alliance_wins = 2
    assert (matchup.winner(), matchup.loser(), matchup.is_complete()) == (6, 3, True)


def test_matchup_key_str():
    assert str(MatchupKey(33, 12)) == "{Round:33 Group:12}"


@pytest.mark.parametrize("factory,use_winner", [(winner_source, True), (loser_source, False)])
def test_source_helpers(factory, use_winner):
    assert factory(2, 3) == AllianceSource(matchup_key=MatchupKey(2, 3), use_winner=use_winner)


def test_store_ordering_and_copies():
    store = MatchStore()
    for name, group, instance in (("b", 2, 1), ("c", 1, 2), ("a", 1, 1)):
        store.create_match(Match(type=ELIM, display_name=name, elim_round=1, elim_group=group, elim_instance=instance))
    store.create_match(Match(type="qualification", display_name="q"))
    assert [m.display_name for m in elim_matches(store)] == ["a", "b", "c"]
    assert [m.display_name for m in store.get_matches_by_elim_round_group(1, 1)] == ["a", "c"]
    store.get_match_by_name(ELIM, "a").red1 = 999
    assert store.get_match_by_name(ELIM, "a").red1 == 0
    assert store.get_match_by_name(ELIM, "zzz") is None
    store.truncate_matches()
    assert elim_matches(store) == []


@pytest.mark.parametrize(
    "action",
    [
        lambda store: store.update_match(Match(id=42)),
        lambda store: store.delete_match(42),
        lambda store: store.update_alliance_from_match(5, (1, 2, 3)),
    ],
)
def test_store_errors(action):
    with pytest.raises(BracketError):
        action(MatchStore())


def test_store_alliances():
    store = make_store(2)
    store.update_alliance_from_match(1, (104, 101, 102))
    alliance = store.get_alliance_by_id(1)
    assert alliance.lineup == (104, 101, 102)
    assert alliance.team_ids == [101, 102, 103, 104]
    store.truncate_alliances()
    assert store.get_alliance_by_id(1) is None


def test_match_is_complete():
    assert not Match().is_complete()
    assert Match(status=MatchStatus.TIE_MATCH).is_complete()


def test_update_creates_and_tracks_series():
    store = make_store(2)
    final = best_of_three_final()
    final.update(store)
    matches = elim_matches(store)
    assert len(matches) == 2
    for match, name in zip(matches, ("F-1", "F-2")):
        check_match(match, name, 1, 2)

    set_status(store, ("F-1", MatchStatus.TIE_MATCH))
    final.update(store)
    matches = elim_matches(store)
    assert len(matches) == 3
    check_match(matches[2], "F-3", 1, 2)

    set_status(store, ("F-2", MatchStatus.BLUE_WON_MATCH), ("F-3", MatchStatus.BLUE_WON_MATCH))
    final.update(store)
    assert final.is_complete()
    assert (final.winner(), final.loser()) == (2, 1)
    assert len(elim_matches(store)) == 3


def test_update_removes_superfluous_matches():
    store = make_store(2)
    final = best_of_three_final()
    final.update(store)
    set_status(store, ("F-1", MatchStatus.RED_WON_MATCH), ("F-2", MatchStatus.TIE_MATCH))
    final.update(store)
    assert len(elim_matches(store)) == 3
    set_status(store, ("F-2", MatchStatus.RED_WON_MATCH))
    final.update(store)
    assert final.is_complete()
    assert len(elim_matches(store)) == 2


def test_update_propagates_from_source_matchup():
    store = make_store(3)
    semi = Matchup(MatchupTemplate(MatchupKey(1, 1), "2", 1), red_alliance_id=2, blue_alliance_id=3)
    final = Matchup(
        MatchupTemplate(MatchupKey(2, 1), "F", 2, AllianceSource(alliance_id=1), winner_source(1, 1)),
        blue_source_matchup=semi,
        red_alliance_id=1,
    )
    final.update(store)
    matches = elim_matches(store)
    assert len(matches) == 1
    check_match(matches[0], "2", 2, 3)

    set_status(store, ("2", MatchStatus.BLUE_WON_MATCH))
    final.update(store)
    matches = elim_matches(store)
    assert len(matches) == 3
    for match, name in zip(matches[1:], ("F-1", "F-2")):
        check_match(match, name, 1, 3)

    set_status(store, ("2", MatchStatus.MATCH_NOT_PLAYED))
    final.update(store)
    assert len(elim_matches(store)) == 1
    assert final.blue_alliance_id == 0


def test_update_refreshes_lineups_of_unplayed_matches():
    store = make_store(2)
    final = best_of_three_final()
    final.update(store)
    store.update_alliance_from_match(1, (103, 102, 101))
    final.update(store)
    assert [(m.red1, m.red2, m.red3) for m in elim_matches(store)] == [(103, 102, 101)] * 2


def test_update_missing_alliance():
    store = make_store(1)
    with pytest.raises(BracketError, match="alliance 2 does not exist in the database"):
        best_of_three_final().update(store)