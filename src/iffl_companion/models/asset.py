"""
Asset-related Pydantic models.

An asset is one row of the season master list: either a rostered player
or a draft pick that has not been used yet.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class RosterPlayer(BaseModel):
    """Player view of an asset."""

    model_config = ConfigDict(frozen=True)

    team: str
    position: str
    player: str
    price_2025: str
    price_2026: str
    price_2027: str
    original_price: str
    purchase_year: int
    contract_year: str
    player_pool: str

    @property
    def formatted_purchase_year(self) -> str:
        return f"{self.purchase_year:04d}"


class DraftPick(BaseModel):
    """Draft pick view of an asset."""

    model_config = ConfigDict(frozen=True)

    round: str
    price: str
    player_name: str | None = Field(
        default=None, description="Player taken with the pick, if any"
    )
    nfl_team: str | None = None
    team: str
    trade_history: str | None = None


class Asset(BaseModel):
    """A tradeable unit from the master list (player or draft pick)."""

    model_config = ConfigDict(frozen=True)

    team: str
    position: str = ""
    name: str
    price_2025: str = "$0"
    price_2026: str = ""
    price_2027: str = ""
    original_price: str = ""
    purchase_year: int = 0
    contract_year: str = ""
    player_pool: str = ""
    rookie_round: str = ""
    draft_year: str = ""
    trade_history: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def asset_id(self) -> str:
        # Team + name is the only identity the sheet offers; two identically
        # named assets on one team collide.
        return f"{self.team}{self.name}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_pick(self) -> bool:
        # Whitespace-only cells count as empty.
        return bool(self.rookie_round.strip()) or bool(self.draft_year.strip())

    @property
    def subtitle(self) -> str:
        """Second list line: round for picks, position for players."""
        label = self.rookie_round if self.is_pick else self.position
        return f"{label} - {self.team}"

    def to_roster_player(self) -> RosterPlayer:
        return RosterPlayer(
            team=self.team,
            position=self.position,
            player=self.name,
            price_2025=self.price_2025,
            price_2026=self.price_2026,
            price_2027=self.price_2027,
            original_price=self.original_price,
            purchase_year=self.purchase_year,
            contract_year=self.contract_year,
            player_pool=self.player_pool,
        )

    def to_draft_pick(self) -> DraftPick:
        return DraftPick(
            round=self.rookie_round,
            price=self.price_2025,
            player_name=None if "Pick" in self.name else self.name,
            nfl_team=None,
            team=self.team,
            trade_history=self.trade_history or None,
        )


class ParseReport(BaseModel):
    """Outcome of converting a batch of sheet rows."""

    total_rows: int = 0
    parsed: int = 0
    skipped_rows: list[int] = Field(
        default_factory=list, description="Indexes of rows too short to parse"
    )

    @property
    def skipped(self) -> int:
        return len(self.skipped_rows)
