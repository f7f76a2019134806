# playoff_bracket

Models a playoff elimination bracket for a tournament of alliances and keeps its
match schedule up to date as results come in.

Two formats are provided in `playoff_bracket.formats`:

- **Single elimination** (`new_single_elimination_bracket`): 2 to 16 alliances,
  best-of-three series in every round. Matchups that a small tournament does not
  need are pruned, and higher seeds get byes into later rounds.
- **Double elimination** (`new_double_elimination_bracket`): exactly 8 alliances,
  single-match rounds ending in a best-of-three final.

Asking for an unsupported number of alliances raises `BracketError`.

## Installation

```
pip install .
```

## Usage

A bracket reads and writes alliances and matches through a `MatchStore`. Fill the
store with alliances, build a bracket, then call `update` after each result:

```python
from datetime import datetime, timezone

from playoff_bracket.formats import new_single_elimination_bracket
from playoff_bracket.matchup import Alliance, MatchStatus, MatchStore

store = MatchStore()
for alliance_id in range(1, 5):
    base = 100 * alliance_id
    store.create_alliance(Alliance(id=alliance_id, lineup=(base + 2, base + 1, base + 3)))

bracket = new_single_elimination_bracket(4)
start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
bracket.update(store, start)

for match in store.get_matches_by_type("elimination"):
    print(match.display_name, match.elim_red_alliance, match.elim_blue_alliance, match.time)

# Record a result and let the bracket create, reschedule or delete matches.
match = store.get_match_by_name("elimination", "SF1-1")
match.status = MatchStatus.RED_WON_MATCH
store.update_match(match)
bracket.update(store, start)
```

Calling `update` with a start time reschedules every unplayed elimination match,
600 seconds apart, in the order `get_matches_by_type` returns them (by round,
then instance, then group). Pass `None`, or leave the argument out, to keep the
existing times.

Match outcomes are `MatchStatus.MATCH_NOT_PLAYED`, `RED_WON_MATCH`,
`BLUE_WON_MATCH` and `TIE_MATCH`. A tie adds a match to the series. If a result
is edited later, matches that are no longer needed are deleted and later rounds
are rebuilt; setting a result back to `MATCH_NOT_PLAYED` removes the matches of
any round that depended on it.

Teams in unplayed matches follow the alliance's current `lineup`.
`MatchStore.update_alliance_from_match(alliance_id, lineup)` sets that lineup
from the teams that played, so a reordering carries over into later matches.

## The match store

`MatchStore` keeps alliances and matches in memory. It hands out copies: change a
`Match` and pass it to `update_match` for the change to take effect. It assigns
match IDs in `create_match`, and `update_match`, `delete_match` and
`update_alliance_from_match` raise `BracketError` for an unknown ID.
`truncate_alliances` and `truncate_matches` clear it.

## Inspecting a bracket

- `bracket.winner()` and `bracket.finalist()` return alliance IDs, or 0 while
  they are not yet known. `bracket.is_complete()` tells you whether the final
  has been decided.
- `bracket.finals_matchup` is the final `Matchup`.
- `bracket.get_all_matchups()` lists matchups by round, then by group.
- `bracket.get_matchup(round, group)` raises `BracketError` if the bracket has
  no matchup for that round and group.
- `bracket.reverse_round_order_traversal(visit)` calls `visit` on each matchup,
  from the final back to the earliest round, following winner links.
- On a `Matchup`, `status_text()` returns a `(leader, status)` pair such as
  `("red", "Red Leads 1-0")`. `long_display_name()` gives `"Finals"`,
  `"Match 13"` or a name such as `"SF2"`, and
  `red_alliance_source_display_name()` / `blue_alliance_source_display_name()`
  give labels such as `"W SF1"` or `"L 12"`. `match_display_name(instance)`
  gives the name of one match in the series, such as `"F-1"`.

## Custom formats

`playoff_bracket.bracket.new_bracket(templates, finals_key, num_alliances)`
builds a bracket from `MatchupTemplate` objects. Each template has a `MatchupKey`
(round and group), a display name, the number of wins to advance, and a red and
a blue `AllianceSource`: either `AllianceSource(alliance_id=...)` for a seed from
alliance selection, or `winner_source(round, group)` / `loser_source(round, group)`
to link to another matchup. A display name of `"F"` marks the final.
`new_bracket` raises `BracketError` when a template is missing, when a template
mixes a seed with a linked source, or when no matchup is left to play.

## What this package does not do

It has no command-line program, server or display screens, and it does not
persist anything: `MatchStore` lives in memory only. Scoring matches is up to the
caller, who records each outcome on a `Match` in the store.

## Running the tests

```
pip install ".[test]"
pytest
```