"""
Trade ledger Pydantic models.
"""

from pydantic import BaseModel, ConfigDict, Field


class Trade(BaseModel):
    """A single historical transaction between two teams on one date."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="Raw M/D/YY string from the ledger")
    team1: str
    team2: str
    team1_receives: tuple[str, ...] = ()
    team2_receives: tuple[str, ...] = ()

    @property
    def year_key(self) -> str | None:
        """Third '/'-separated component of the date, or None when malformed."""
        parts = self.date.split("/")
        if len(parts) != 3:
            return None
        return parts[2]

    @property
    def title(self) -> str:
        return f"{self.date} - {self.team1} & {self.team2}"

    def matches(self, text: str) -> bool:
        """Case-insensitive match on date, teams or either asset list."""
        needle = text.lower()
        haystacks = (
            self.date,
            self.team1,
            self.team2,
            " ".join(self.team1_receives),
            " ".join(self.team2_receives),
        )
        return any(needle in h.lower() for h in haystacks)
