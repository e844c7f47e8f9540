"""
Extract Speetto readings from the 동행복권 game-info page.

Plain pattern matching over unstructured HTML, no DOM. Each game is located by
its "<label> <round>회 안내사항" heading; everything else is read from the text
between that heading and the next one.

Prize counts are recovered heuristically: numbers inside <strong>/<b> first, then
comma-grouped integers from the section body to fill the remaining tiers. When
the page layout drifts this can pick up the wrong numbers. It never raises: a
game whose section cannot be found is left out of the result.
"""
import logging
import re
from datetime import date

from speetto_monitor.core.constants import SECTION_WINDOW_CHARS, TRACKED_GAMES, Game
from speetto_monitor.core.errors import ParseError
from speetto_monitor.services.speetto.types import GameReading, PrizeTier

logger = logging.getLogger(__name__)

SECTION_END_MARKER = "회 안내사항"
PRIZE_TIER_COUNT = 3

# "25-09-17 기준"
_AS_OF_RE = re.compile(r"(\d{2})-(\d{2})-(\d{2})\s*기준")
# "판매점 입고율 ... 100%" (label and value may sit in different cells)
_INSTOCK_RE = re.compile(r"판매점\s*입고율.*?(\d+)(?:\.\d+)?\s*%", re.DOTALL)
# "<strong>1,234</strong>", "<b class="x">15매</b>"
_EMPHASIS_RE = re.compile(r"<(strong|b)(?:\s[^>]*)?>\s*(\d[\d,]*)\s*매?\s*</\1\s*>", re.IGNORECASE)
# "25", "1,234", "12,000"; not part of a date, decimal, percentage or longer digit run,
# and not a rank, round, amount or date unit ("1등", "99회", "5억원", "9월")
_GROUPED_INT_RE = re.compile(
    r"(?<![A-Za-z\d,.\-])\d{1,3}(?:,\d{3})*(?![A-Za-z\d,.%\-]|\s*[등회억천만원년월일시분])"
)
_TAG_RE = re.compile(r"<[^>]*>")
_NEXT_HEADING_TAIL_RE = re.compile(r"(?:스피또\s*\d+\s*)?\d+\s*$")


def _heading_re(label: str) -> re.Pattern:
    return re.compile(rf"{re.escape(label)}\s*(\d+)\s*회\s*안내사항")


def _to_int(text: str) -> int:
    return int(text.replace(",", ""))


def find_section(html: str, game: Game) -> tuple[int, str, int]:
    """
    Return (round, section_text, heading_length) for a game.
    Raises ParseError when the heading is missing.
    """
    match = _heading_re(game.display_name).search(html)
    if not match:
        raise ParseError(f"{game.display_name} round heading not found")
    round_no = int(match.group(1))
    if round_no <= 0:
        raise ParseError(f"{game.display_name} has invalid round {round_no}")
    start = match.start()
    end = html.find(SECTION_END_MARKER, match.end())
    if end < 0:
        section = html[start:start + SECTION_WINDOW_CHARS]
    else:
        # Cut "스피또2000 61" of the next heading off the tail
        section = _NEXT_HEADING_TAIL_RE.sub("", html[start:end])
    return round_no, section, match.end() - start


def parse_as_of(section: str, today: date) -> date:
    m = _AS_OF_RE.search(section)
    if not m:
        return today
    try:
        return date(2000 + int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        logger.debug("Invalid as-of date %s; using %s", m.group(0), today)
        return today


def parse_instock_rate(section: str) -> int:
    m = _INSTOCK_RE.search(section)
    return int(m.group(1)) if m else 0


def parse_remaining_counts(section: str, body_start: int = 0) -> list[int]:
    """
    Up to three remaining counts (1st, 2nd, 3rd prize) in document order.

    Emphasized numbers win. If fewer than three are found, the rest is
    backfilled from comma-grouped integers after body_start, skipping numbers
    already taken from emphasis markup.
    """
    numbers: list[int] = []
    taken: list[tuple[int, int]] = []
    for m in _EMPHASIS_RE.finditer(section):
        numbers.append(_to_int(m.group(2)))
        taken.append(m.span(2))
        if len(numbers) == PRIZE_TIER_COUNT:
            return numbers

    # Blank out tags (same length, so offsets still line up with `taken`)
    text = _TAG_RE.sub(lambda t: " " * len(t.group(0)), section)
    for m in _GROUPED_INT_RE.finditer(text, body_start):
        if any(s <= m.start() < e for s, e in taken):
            continue
        numbers.append(_to_int(m.group(0)))
        if len(numbers) == PRIZE_TIER_COUNT:
            break
    return numbers


def extract_game(html: str, game: Game, today: date) -> GameReading:
    """Build one reading. Raises ParseError when the game's section is missing."""
    round_no, section, heading_len = find_section(html, game)
    counts = parse_remaining_counts(section, body_start=heading_len)
    counts += [0] * (PRIZE_TIER_COUNT - len(counts))
    first, second, third = game.prize_labels
    return GameReading(
        game=game,
        round=round_no,
        as_of=parse_as_of(section, today),
        store_instock_rate=parse_instock_rate(section),
        first=PrizeTier(first, counts[0]),
        second=PrizeTier(second, counts[1]),
        third=PrizeTier(third, counts[2]),
    )


def extract(raw_markup: str, today: date | None = None) -> list[GameReading]:
    """All readings found in the markup, in TRACKED_GAMES order. Never raises."""
    html = raw_markup or ""
    day = today or date.today()
    readings: list[GameReading] = []
    for game in TRACKED_GAMES:
        try:
            readings.append(extract_game(html, game, day))
        except ParseError as e:
            logger.warning("Skipping %s: %s", game.value, e)
        except Exception:
            logger.exception("Unexpected error extracting %s; skipping", game.value)
    return readings
