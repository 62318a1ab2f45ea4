"""
League roster configuration.

Teams, colors and logos change between seasons, so they are loaded from a
JSON file at startup instead of being compiled in.
"""

import json
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_LEAGUE_RESOURCE = "league.json"


class FantasyTeam(BaseModel):
    """A franchise in the league."""

    name: str
    color: str
    logo: str


class LeagueConfig(BaseModel):
    """League roster loaded once at startup."""

    name: str = "IFFL"
    full_name: str = Field(default="Insanity Fantasy Football League")
    established: int | None = None
    default_team: str
    teams: list[FantasyTeam] = Field(default_factory=list)

    def team_names(self) -> list[str]:
        return [t.name for t in self.teams]

    def get_team(self, name: str) -> FantasyTeam | None:
        for team in self.teams:
            if team.name == name:
                return team
        return None

    def team_for_email(self, email: str | None) -> str:
        """
        Default team for a signed-in user.

        First team whose name contains the email's local part, otherwise the
        league's default team.
        """
        prefix = (email or "").split("@", 1)[0]
        if prefix:
            for team in self.teams:
                if prefix in team.name:
                    return team.name
        return self.default_team


def load_league_config(path: Path | None = None) -> LeagueConfig:
    """
    Load the league roster.

    Args:
        path: JSON file to read; the packaged default is used when None

    Returns:
        Parsed LeagueConfig
    """
    if path is not None:
        raw = Path(path).read_text(encoding="utf-8")
    else:
        raw = (
            resources.files("iffl_companion.data")
            .joinpath(DEFAULT_LEAGUE_RESOURCE)
            .read_text(encoding="utf-8")
        )
    return LeagueConfig.model_validate(json.loads(raw))
