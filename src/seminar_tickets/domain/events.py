"""Event details printed on tickets and shown to buyers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EventDetails:
    """Fixed facts about the seminar being sold."""

    name: str
    title_lines: tuple[str, ...]
    tagline: str
    venue: str
    date: str
    time: str
    location: str


MARITAL_GRACE = EventDetails(
    name="Marital Grace Seminar",
    title_lines=("MARITAL", "GRACE"),
    tagline="THE KEY TO 32 YEARS OF MARRIAGE",
    venue="The Synagogues JWC",
    date="14.03.2026",
    time="9:00am",
    location="63 Langrand Road, Vereeniging, 1929",
)
