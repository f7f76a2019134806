"""Matchups between two alliances in a playoff bracket, and the match store they work against."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


class BracketError(Exception):
    """Raised when a bracket or its matches cannot be built or updated."""


class MatchStatus(Enum):
    """Outcome of a single match."""

    MATCH_NOT_PLAYED = ""
    RED_WON_MATCH = "R"
    BLUE_WON_MATCH = "B"
    TIE_MATCH = "T"


@dataclass
class Alliance:
    """A playoff alliance and the three teams currently in its lineup."""

    id: int
    team_ids: list[int] = field(default_factory=list)
    lineup: tuple[int, int, int] = (0, 0, 0)


@dataclass
class Match:
    """A single scheduled or played match."""

    id: int = 0
    type: str = ""
    display_name: str = ""
    time: datetime | None = None
    elim_round: int = 0
    elim_group: int = 0
    elim_instance: int = 0
    elim_red_alliance: int = 0
    elim_blue_alliance: int = 0
    red1: int = 0
    red2: int = 0
    red3: int = 0
    blue1: int = 0
    blue2: int = 0
    blue3: int = 0
    status: MatchStatus = MatchStatus.MATCH_NOT_PLAYED

    def is_complete(self) -> bool:
        """Return True if the match has a recorded result."""
        return self.status != MatchStatus.MATCH_NOT_PLAYED

    @property
    def red_lineup(self) -> tuple[int, int, int]:
        return (self.red1, self.red2, self.red3)

    @red_lineup.setter
    def red_lineup(self, lineup: tuple[int, int, int]) -> None:
        self.red1, self.red2, self.red3 = lineup

    @property
    def blue_lineup(self) -> tuple[int, int, int]:
        return (self.blue1, self.blue2, self.blue3)

    @blue_lineup.setter
    def blue_lineup(self, lineup: tuple[int, int, int]) -> None:
        self.blue1, self.blue2, self.blue3 = lineup


def _copy_alliance(alliance: Alliance) -> Alliance:
    return dataclasses.replace(alliance, team_ids=list(alliance.team_ids))


class MatchStore:
    """In-memory storage of alliances and matches.

    Objects handed out are copies; changes take effect only through the update methods.
    """

    def __init__(self) -> None:
        self._alliances: dict[int, Alliance] = {}
        self._matches: dict[int, Match] = {}
        self._next_match_id = 1

    def create_alliance(self, alliance: Alliance) -> Alliance:
        """Store a new alliance, replacing any with the same ID."""
        self._alliances[alliance.id] = _copy_alliance(alliance)
        return alliance

    def get_alliance_by_id(self, alliance_id: int) -> Alliance | None:
        """Return the alliance with the given ID, or None if there is none."""
        alliance = self._alliances.get(alliance_id)
        return None if alliance is None else _copy_alliance(alliance)

    def update_alliance_from_match(self, alliance_id: int, lineup) -> None:
        """Set an alliance's lineup from the teams that played for it in a match."""
        alliance = self._alliances.get(alliance_id)
        if alliance is None:
            raise BracketError(f"alliance {alliance_id} does not exist in the database")
        alliance.lineup = tuple(lineup)
        alliance.team_ids.extend(team for team in alliance.lineup if team not in alliance.team_ids)

    def create_match(self, match: Match) -> Match:
        """Store a new match, assigning its ID."""
        match.id = self._next_match_id
        self._next_match_id += 1
        self._matches[match.id] = dataclasses.replace(match)
        return match

    def update_match(self, match: Match) -> None:
        """Overwrite the stored copy of an existing match."""
        if match.id not in self._matches:
            raise BracketError(f"match {match.id} does not exist in the database")
        self._matches[match.id] = dataclasses.replace(match)

    def delete_match(self, match_id: int) -> None:
        """Remove a match."""
        if self._matches.pop(match_id, None) is None:
            raise BracketError(f"match {match_id} does not exist in the database")

    def get_matches_by_type(self, match_type: str) -> list[Match]:
        """Return the matches of a type, ordered by round, instance, group."""
        matches = [m for m in self._matches.values() if m.type == match_type]
        matches.sort(key=lambda m: (m.elim_round, m.elim_instance, m.elim_group, m.id))
        return [dataclasses.replace(m) for m in matches]

    def get_matches_by_elim_round_group(self, round: int, group: int) -> list[Match]:
        """Return the elimination matches of one matchup, ordered by instance."""
        matches = [
            m
            for m in self._matches.values()
            if m.type == "elimination" and m.elim_round == round and m.elim_group == group
        ]
        matches.sort(key=lambda m: (m.elim_instance, m.id))
        return [dataclasses.replace(m) for m in matches]

    def get_match_by_name(self, match_type: str, display_name: str) -> Match | None:
        """Return the match of a type with the given display name, or None."""
        for match in self._matches.values():
            if match.type == match_type and match.display_name == display_name:
                return dataclasses.replace(match)
        return None

    def truncate_alliances(self) -> None:
        """Remove all alliances."""
        self._alliances.clear()

    def truncate_matches(self) -> None:
        """Remove all matches."""
        self._matches.clear()


@dataclass(frozen=True)
class MatchupKey:
    """Identifies a matchup by round and group within the round."""

    round: int
    group: int

    def __str__(self) -> str:
        return f"{{Round:{self.round} Group:{self.group}}}"


@dataclass(frozen=True)
class AllianceSource:
    """Where an alliance comes from: alliance selection or a prior matchup's winner or loser."""

    alliance_id: int = 0
    matchup_key: MatchupKey = MatchupKey(0, 0)
    use_winner: bool = False


def winner_source(round: int, group: int) -> AllianceSource:
    """Source pointing to the winner of another matchup."""
    return AllianceSource(matchup_key=MatchupKey(round, group), use_winner=True)


def loser_source(round: int, group: int) -> AllianceSource:
    """Source pointing to the loser of another matchup."""
    return AllianceSource(matchup_key=MatchupKey(round, group), use_winner=False)


@dataclass(frozen=True)
class MatchupTemplate:
    """Generic description of a matchup within a bracket format."""

    key: MatchupKey
    display_name: str = ""
    num_wins_to_advance: int = 0
    red_source: AllianceSource = AllianceSource()
    blue_source: AllianceSource = AllianceSource()

    @property
    def round(self) -> int:
        return self.key.round

    @property
    def group(self) -> int:
        return self.key.group

    def match_display_name(self, instance: int) -> str:
        """Display name for a specific match within the matchup."""
        if self.num_wins_to_advance > 1 or instance > 1:
            return f"{self.display_name}-{instance}"
        return self.display_name


@dataclass(eq=False)
class Matchup:
    """State of a series of matches between the same two alliances."""

    template: MatchupTemplate
    red_source_matchup: Matchup | None = None
    blue_source_matchup: Matchup | None = None
    red_alliance_id: int = 0
    blue_alliance_id: int = 0
    red_alliance_wins: int = 0
    blue_alliance_wins: int = 0

    @property
    def key(self) -> MatchupKey:
        return self.template.key

    @property
    def round(self) -> int:
        return self.template.round

    @property
    def group(self) -> int:
        return self.template.group

    @property
    def display_name(self) -> str:
        return self.template.display_name

    @property
    def num_wins_to_advance(self) -> int:
        return self.template.num_wins_to_advance

    def match_display_name(self, instance: int) -> str:
        return self.template.match_display_name(instance)

    def long_display_name(self) -> str:
        """Display name for the matchup as a whole."""
        if self.is_final():
            return "Finals"
        if _INTEGER_PATTERN.fullmatch(self.display_name):
            return "Match " + self.display_name
        return self.display_name

    @staticmethod
    def _source_display_name(source: AllianceSource, source_matchup: Matchup | None) -> str:
        if source_matchup is None:
            return ""
        prefix = "W " if source.use_winner else "L "
        return prefix + source_matchup.display_name

    def red_alliance_source_display_name(self) -> str:
        """Display name of the matchup feeding the red alliance, or an empty string."""
        return self._source_display_name(self.template.red_source, self.red_source_matchup)

    def blue_alliance_source_display_name(self) -> str:
        """Display name of the matchup feeding the blue alliance, or an empty string."""
        return self._source_display_name(self.template.blue_source, self.blue_source_matchup)

    def status_text(self) -> tuple[str, str]:
        """Return the leading alliance colour and a readable status of the series."""
        win_text = "Wins" if self.is_final() else "Advances"
        red, blue = self.red_alliance_wins, self.blue_alliance_wins
        if red >= self.num_wins_to_advance:
            return "red", f"Red {win_text} {red}-{blue}"
        if blue >= self.num_wins_to_advance:
            return "blue", f"Blue {win_text} {blue}-{red}"
        if red > blue:
            return "red", f"Red Leads {red}-{blue}"
        if blue > red:
            return "blue", f"Blue Leads {blue}-{red}"
        if red > 0:
            return "", f"Series Tied {red}-{blue}"
        return "", ""

    def winner(self) -> int:
        """Winning alliance ID, or 0 if not yet known."""
        if self.red_alliance_wins >= self.num_wins_to_advance:
            return self.red_alliance_id
        if self.blue_alliance_wins >= self.num_wins_to_advance:
            return self.blue_alliance_id
        return 0

    def loser(self) -> int:
        """Losing alliance ID, or 0 if not yet known."""
        if self.red_alliance_wins >= self.num_wins_to_advance:
            return self.blue_alliance_id
        if self.blue_alliance_wins >= self.num_wins_to_advance:
            return self.red_alliance_id
        return 0

    def is_complete(self) -> bool:
        """True if the matchup has been won."""
        return self.winner() > 0

    def is_final(self) -> bool:
        """True if this is the final matchup of the bracket."""
        return self.display_name == "F"

    @staticmethod
    def _resolve(source: AllianceSource, source_matchup: Matchup) -> int:
        return source_matchup.winner() if source.use_winner else source_matchup.loser()

    def update(self, store: MatchStore) -> None:
        """Recompute this matchup and those feeding it, creating or deleting matches as needed."""
        red_source, blue_source = self.template.red_source, self.template.blue_source

        # Only follow winner links so that no matchup is visited twice.
        for source, child in ((red_source, self.red_source_matchup), (blue_source, self.blue_source_matchup)):
            if child is not None and source.use_winner:
                child.update(store)

        if self.red_source_matchup is not None:
            self.red_alliance_id = self._resolve(red_source, self.red_source_matchup)
        if self.blue_source_matchup is not None:
            self.blue_alliance_id = self._resolve(blue_source, self.blue_source_matchup)

        matches = store.get_matches_by_elim_round_group(self.round, self.group)

        if self.red_alliance_id == 0 or self.blue_alliance_id == 0:
            self.red_alliance_wins = 0
            self.blue_alliance_wins = 0
            for match in matches:
                store.delete_match(match.id)
            return

        red_alliance = store.get_alliance_by_id(self.red_alliance_id)
        if red_alliance is None:
            raise BracketError(f"alliance {self.red_alliance_id} does not exist in the database")
        blue_alliance = store.get_alliance_by_id(self.blue_alliance_id)
        if blue_alliance is None:
            raise BracketError(f"alliance {self.blue_alliance_id} does not exist in the database")

        self.red_alliance_wins = 0
        self.blue_alliance_wins = 0
        unplayed: list[Match] = []
        for match in matches:
            if not match.is_complete():
                changed = False
                if match.red_lineup != tuple(red_alliance.lineup):
                    match.red_lineup = tuple(red_alliance.lineup)
                    match.elim_red_alliance = red_alliance.id
                    changed = True
                if match.blue_lineup != tuple(blue_alliance.lineup):
                    match.blue_lineup = tuple(blue_alliance.lineup)
                    match.elim_blue_alliance = blue_alliance.id
                    changed = True
                if changed:
                    store.update_match(match)
                unplayed.append(match)
                continue

            if match.status == MatchStatus.RED_WON_MATCH:
                self.red_alliance_wins += 1
            elif match.status == MatchStatus.BLUE_WON_MATCH:
                self.blue_alliance_wins += 1

        needed = self.num_wins_to_advance - max(self.red_alliance_wins, self.blue_alliance_wins)
        if len(unplayed) > needed:
            for match in reversed(unplayed[max(needed, 0):]):
                store.delete_match(match.id)
        elif len(unplayed) < needed:
            for offset in range(needed - len(unplayed)):
                instance = len(matches) + offset + 1
                match = Match(
                    type="elimination",
                    display_name=self.match_display_name(instance),
                    elim_round=self.round,
                    elim_group=self.group,
                    elim_instance=instance,
                    elim_red_alliance=red_alliance.id,
                    elim_blue_alliance=blue_alliance.id,
                )
                match.red_lineup = tuple(red_alliance.lineup)
                match.blue_lineup = tuple(blue_alliance.lineup)
                store.create_match(match)