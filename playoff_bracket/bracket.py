"""A playoff elimination bracket built from matchup templates."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from playoff_bracket.matchup import (
    BracketError,
    MatchStore,
    Matchup,
    MatchupKey,
    MatchupTemplate,
)

ELIM_MATCH_SPACING_SEC = 600


class Bracket:
    """A playoff bracket: a graph of matchups leading to the finals."""

    def __init__(self, finals_matchup: Matchup, matchups: dict[MatchupKey, Matchup]) -> None:
        self.finals_matchup = finals_matchup
        self._matchups = matchups

    def winner(self) -> int:
        """Winning alliance ID of the whole bracket, or 0 if not yet known."""
        return self.finals_matchup.winner()

    def finalist(self) -> int:
        """Finalist alliance ID of the whole bracket, or 0 if not yet known."""
        return self.finals_matchup.loser()

    def is_complete(self) -> bool:
        """True if the bracket has been won."""
        return self.finals_matchup.is_complete()

    def get_all_matchups(self) -> list[Matchup]:
        """All matchups in the bracket, ordered by round and then group."""
        return sorted(self._matchups.values(), key=lambda m: (m.round, m.group))

    def get_matchup(self, round: int, group: int) -> Matchup:
        """Return the matchup for a round and group, raising BracketError if absent."""
        key = MatchupKey(round, group)
        try:
            return self._matchups[key]
        except KeyError:
            raise BracketError(f"bracket does not contain matchup for key {key}") from None

    def update(self, store: MatchStore, start_time: datetime | None = None) -> None:
        """Update every matchup from match results and reschedule unplayed matches."""
        self.finals_matchup.update(store)

        if start_time is None:
            return
        unplayed = (m for m in store.get_matches_by_type("elimination") if not m.is_complete())
        for index, match in enumerate(unplayed):
            match.time = start_time + timedelta(seconds=index * ELIM_MATCH_SPACING_SEC)
            store.update_match(match)

    def reverse_round_order_traversal(self, visit: Callable[[Matchup], None]) -> None:
        """Visit each matchup from the finals back to the earliest round."""
        queue = [self.finals_matchup]
        while queue:
            # Graph depth does not necessarily equal round, so reorder each time.
            queue.sort(key=lambda m: (-m.round, m.group))
            matchup = queue.pop(0)
            visit(matchup)
            template = matchup.template
            if matchup.red_source_matchup is not None and template.red_source.use_winner:
                queue.append(matchup.red_source_matchup)
            if matchup.blue_source_matchup is not None and template.blue_source.use_winner:
                queue.append(matchup.blue_source_matchup)


def new_bracket(
    templates: Iterable[MatchupTemplate], finals_key: MatchupKey, num_alliances: int
) -> Bracket:
    """Build an unpopulated bracket from templates for the given number of alliances."""
    template_map = {template.key: template for template in templates}
    matchups: dict[MatchupKey, Matchup] = {}
    finals, _ = _create_matchup_graph(finals_key, True, template_map, num_alliances, matchups)
    if finals is None:
        raise BracketError("bracket contains no matchups to be played")
    return Bracket(finals, matchups)


def _get_or_create(matchups: dict[MatchupKey, Matchup], key: MatchupKey, **fields) -> Matchup:
    matchup = matchups.get(key)
    if matchup is None:
        matchup = Matchup(**fields)
        matchups[key] = matchup
    return matchup


def _create_matchup_graph(
    key: MatchupKey,
    use_winner: bool,
    template_map: dict[MatchupKey, MatchupTemplate],
    num_alliances: int,
    matchups: dict[MatchupKey, Matchup],
) -> tuple[Matchup | None, int]:
    """Create the matchup for a key and its children.

    Returns the matchup, or None with the ID of an alliance that has a bye (0 if the matchup is pruned).
    """
    template = template_map.get(key)
    if template is None:
        raise BracketError(f"could not find template for matchup {key} in the list of templates")

    red_id = template.red_source.alliance_id
    blue_id = template.blue_source.alliance_id
    if red_id > 0 or blue_id > 0:
        # Leaf node: alliances come straight from alliance selection.
        if red_id == 0 or blue_id == 0:
            raise BracketError("both alliances must be populated either from selection or a lower round")
        if red_id > num_alliances:
            red_id = 0
        if blue_id > num_alliances:
            blue_id = 0

        if red_id > 0 and blue_id > 0:
            matchup = _get_or_create(
                matchups, key, template=template, red_alliance_id=red_id, blue_alliance_id=blue_id
            )
            return matchup, 0
        if red_id == 0 and blue_id == 0:
            return None, 0
        if use_winner:
            return None, red_id or blue_id
        return None, 0

    red_matchup, red_bye = _create_matchup_graph(
        template.red_source.matchup_key, template.red_source.use_winner, template_map, num_alliances, matchups
    )
    blue_matchup, blue_bye = _create_matchup_graph(
        template.blue_source.matchup_key, template.blue_source.use_winner, template_map, num_alliances, matchups
    )

    red_empty = red_matchup is None and red_bye == 0
    blue_empty = blue_matchup is None and blue_bye == 0
    if red_empty and blue_empty:
        return None, 0
    if red_bye > 0 and blue_empty:
        return (None, red_bye) if use_winner else (None, 0)
    if blue_bye > 0 and red_empty:
        return (None, blue_bye) if use_winner else (None, 0)

    matchup = _get_or_create(
        matchups,
        key,
        template=template,
        red_alliance_id=red_bye,
        blue_alliance_id=blue_bye,
        red_source_matchup=red_matchup,
        blue_source_matchup=blue_matchup,
    )
    return matchup, 0