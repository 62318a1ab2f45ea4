"""Shared fixtures: sample sheet ranges, settings and in-memory backends."""

import httpx
import pytest

from iffl_companion.clients.notifications import Notifier
from iffl_companion.clients.sheets import SheetsClient
from iffl_companion.clients.store import MemoryDocumentStore
from iffl_companion.config import Settings
from iffl_companion.models.user import CurrentUser
from iffl_companion.services.catalog import AssetCatalog

MASTER_ROWS = [
    ["Jared", "QB", "J. Allen", "$50", "$55", "$60", "$40", "2023", "2026", "Vet", "", " "],
    ["Bill ", "RB", "B. Robinson", "$35", "$38", "$41", "$20", "2024", "2027", "Rookie"],
    ["Jared", "", "2026 1st Pick", "$10", "", "", "", "", "", "1", "2026", "", "From Bill (2024)"],
    ["Abad", "WR", "J. Chase", "$50", "$52", "$54", "$45", "2021", "2025", "Vet"],
    ["Bill", "", "2026 2nd Pick", "$5", "", "", "", "", "", "", "2nd", "2026"],
    ["Cantone", "TE", "S. LaPorta", "$12"],
    ["Short", "QB"],
    ["Abad", "WR", "A. St. Brown", "$1,050"],
]

TRADE_ROWS = [
    ["3/1/24", "Jared", "Bill"],
    ["", "Player A", "Pick B"],
    ["3/15/23", "Bill", "Jared"],
]


class RecordingNotifier(Notifier):
    """Captures notifications instead of sending them."""

    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str, str]] = []
        self.fail = fail

    async def send(self, recipient: str, title: str, body: str) -> bool:
        if self.fail:
            raise RuntimeError("relay unreachable")
        self.sent.append((recipient, title, body))
        return True


def sheets_payload(rows: list[list[str]]) -> dict:
    return {"range": "Sheet!A2:M", "majorDimension": "ROWS", "values": rows}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        spreadsheet_id="sheet-123",
        sheets_api_key="test-key",
        retry_attempts=3,
        retry_min_wait=0,
        retry_max_wait=0,
    )


@pytest.fixture
def master_rows() -> list[list[str]]:
    return [list(r) for r in MASTER_ROWS]


@pytest.fixture
def trade_rows() -> list[list[str]]:
    return [list(r) for r in TRADE_ROWS]


@pytest.fixture
def catalog(master_rows) -> AssetCatalog:
    catalog = AssetCatalog()
    catalog.load(master_rows)
    return catalog


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def user() -> CurrentUser:
    return CurrentUser(user_id="uid-jared", email="Jared@example.com")


@pytest.fixture
def sheets_factory(settings):
    """Build a SheetsClient whose HTTP calls are answered by ``handler``."""

    def make(handler) -> SheetsClient:
        return SheetsClient(settings, transport=httpx.MockTransport(handler))

    return make
