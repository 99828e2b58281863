"""Reference cache of valid B3 ticker symbols.

The cache answers "is this instrument code listed?" and "which codes are
listed?" from an in-memory snapshot that is rebuilt wholesale from a CSV
export of listed B3 stocks.

Refresh Strategy:
- The snapshot is stale when empty or older than the refresh interval
  (6 hours by default)
- Candidate files are tried in a fixed order: the primary path, then each
  fallback path. The first file that parses wins
- When no file can be read, a hardcoded list of liquid B3 stocks is used
  and a warning is logged so operators know the data is degraded

Concurrency:
- Rebuilds are serialized by one ``asyncio.Lock`` with a double check
  (test freshness, acquire, test again) so racing callers trigger a single
  reload
- Readers never take the lock. A rebuild assigns a new ``frozenset`` in one
  step, so readers see either the old or the new snapshot, never a partial one

CSV Format:
- First line is a header and is skipped
- The first column holds the ticker, optionally quoted; any further fields
  are ignored, however many a row has
- Rows whose first column is not a plausible ticker are skipped with a warning
"""

import asyncio
import logging
import re
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pandas as pd  # type: ignore[import-untyped]

from invest_api.core.config import Settings

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"

# Yahoo-style suffix for B3 listings ("PETR4.SA")
_B3_SUFFIX = ".SA"
_TICKER_RE = re.compile(r"^[A-Z0-9]{4,12}$")

# Most liquid B3 stocks, used when no CSV can be read
FALLBACK_TICKERS: tuple[str, ...] = (
    "PETR3", "PETR4", "VALE3", "ITUB4", "BBDC3", "BBDC4", "ABEV3", "B3SA3",
    "BBAS3", "MGLU3", "WEGE3", "RAIL3", "RENT3", "CSAN3", "ASAI3", "COGN3",
    "AZUL4", "ITSA4", "CSNA3", "VAMO3", "CVCB3", "PCAR3", "BRAV3", "LREN3",
    "DIRR3", "CPLE6", "MRVE3", "MBRF3", "HAPV3", "VBBR3", "USIM5", "MOTV3",
    "PRIO3", "GGBR4", "TIMS3", "UGPA3", "BEEF3", "POMO4", "BPAC11", "NATU3",
    "CMIN3", "CMIG4", "BRKM5", "ALPA4", "ENEV3", "AURE3", "SUZB3", "ELET3",
    "ELET6", "EMBR3", "KLBN11", "GOAU4", "SBSP3", "TAEE11", "VIVT3", "RADL3",
    "NTCO3", "MRFG3", "JBSS3", "BRAP4", "CPFE3", "ELET4", "MULT3", "QUAL3",
    "IRBR3", "SANB11", "TOTS3", "LWSA3", "MDIA3", "EVEN3", "CYRE3", "JHSF3",
)  # fmt: skip


def normalize_code(code: str) -> str:
    """Trim, uppercase and drop the ``.SA`` suffix.

    Example:
        >>> normalize_code(" petr4.sa ")
        'PETR4'
    """
    return code.strip().upper().removesuffix(_B3_SUFFIX)


@dataclass(frozen=True)
class TickerLoadResult:
    """A fully built snapshot and where it came from."""

    codes: frozenset[str]
    source: str
    loaded_at: datetime


class TickerCache:
    """In-memory set of valid ticker codes with time-based refresh.

    Construct once at startup and share the instance; only ``is_valid``,
    ``list_all`` and ``force_reload`` are meant to be called by routes.

    Example:
        >>> cache = TickerCache.from_settings(settings)
        >>> await cache.is_valid("petr4.sa")
        True
    """

    def __init__(
        self,
        primary_path: str | Path,
        fallback_paths: Sequence[str | Path] = (),
        *,
        refresh_interval: timedelta = timedelta(hours=6),
        fallback_codes: Iterable[str] = FALLBACK_TICKERS,
    ) -> None:
        self.candidate_paths: tuple[Path, ...] = (
            Path(primary_path),
            *(Path(p) for p in fallback_paths),
        )
        self.refresh_interval = refresh_interval
        self._fallback_codes = frozenset(normalize_code(c) for c in fallback_codes)

        self._snapshot: TickerLoadResult | None = None
        self._loaded_monotonic: float | None = None
        self._load_count = 0
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TickerCache":
        """Build the cache from application settings."""
        return cls(
            settings.TICKER_CSV_PATH,
            settings.TICKER_FALLBACK_PATHS,
            refresh_interval=timedelta(hours=settings.TICKER_REFRESH_HOURS),
        )

    async def is_valid(self, code: str) -> bool:
        """Check whether ``code`` is a listed ticker.

        Blank input returns False without touching the cache.
        """
        if not code or not code.strip():
            return False

        snapshot = await self._ensure_fresh()
        return normalize_code(code) in snapshot.codes

    async def list_all(self) -> frozenset[str]:
        """Return the current set of valid codes, refreshing it if stale."""
        snapshot = await self._ensure_fresh()
        return snapshot.codes

    async def force_reload(self) -> TickerLoadResult:
        """Rebuild the snapshot regardless of its age."""
        async with self._lock:
            return await self._reload()

    def stats(self) -> dict[str, object]:
        """Describe the current snapshot for health checks."""
        snapshot = self._snapshot
        return {
            "loaded": snapshot is not None,
            "source": snapshot.source if snapshot else None,
            "count": len(snapshot.codes) if snapshot else 0,
            "loaded_at": snapshot.loaded_at.isoformat() if snapshot else None,
            "stale": self._is_stale(),
            "loads": self._load_count,
        }

    def _is_stale(self) -> bool:
        if self._snapshot is None or not self._snapshot.codes or self._loaded_monotonic is None:
            return True
        age = time.monotonic() - self._loaded_monotonic
        return age > self.refresh_interval.total_seconds()

    async def _ensure_fresh(self) -> TickerLoadResult:
        snapshot = self._snapshot
        if snapshot is not None and not self._is_stale():
            return snapshot

        async with self._lock:
            # Another caller may have reloaded while we waited
            if self._snapshot is not None and not self._is_stale():
                return self._snapshot
            return await self._reload()

    async def _reload(self) -> TickerLoadResult:
        """Build a new snapshot and swap it in. Caller must hold the lock."""
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, self._build_snapshot)

        self._snapshot = result
        self._loaded_monotonic = time.monotonic()
        self._load_count += 1
        return result

    def _build_snapshot(self) -> TickerLoadResult:
        """Try each candidate file in order, then the fallback list."""
        for path in self.candidate_paths:
            codes = self._read_ticker_file(path)
            if codes is not None:
                logger.info(f"Loaded {len(codes)} B3 tickers from {path}")
                return TickerLoadResult(codes, str(path), datetime.now(UTC))

        tried = ", ".join(str(p) for p in self.candidate_paths)
        logger.warning(
            f"No ticker CSV could be read (tried: {tried}). "
            f"Using fallback list with {len(self._fallback_codes)} tickers"
        )
        return TickerLoadResult(self._fallback_codes, FALLBACK_SOURCE, datetime.now(UTC))

    def _read_ticker_file(self, path: Path) -> frozenset[str] | None:
        """Parse one CSV file.

        Returns:
            The set of codes, or None when the file is missing, unreadable,
            or yields no valid code at all
        """
        try:
            if not path.is_file():
                logger.debug(f"Ticker CSV not found at {path}")
                return None
        except OSError as e:
            logger.error(f"Cannot access ticker CSV {path}: {e}")
            return None

        def skip_bad_line(fields: list[str]) -> None:
            logger.warning(f"Skipping malformed ticker CSV line in {path}: {fields}")
            return None

        try:
            df = pd.read_csv(
                path,
                sep=",",
                quotechar='"',
                header=0,
                usecols=[0],
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=skip_bad_line,
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read ticker CSV {path}: {e}")
            return None
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logger.error(f"Failed to parse ticker CSV {path}: {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error loading ticker CSV {path}: {e}")
            return None

        if df.empty or len(df.columns) == 0:
            logger.warning(f"Ticker CSV {path} has no data rows")
            return None

        codes: set[str] = set()
        for row, raw in enumerate(df.iloc[:, 0], start=1):
            code = normalize_code(str(raw))
            if not _TICKER_RE.match(code):
                logger.warning(f"Skipping malformed ticker {raw!r} in {path} (data row {row})")
                continue
            codes.add(code)

        if not codes:
            logger.warning(f"Ticker CSV {path} contained no valid tickers")
            return None

        return frozenset(codes)
