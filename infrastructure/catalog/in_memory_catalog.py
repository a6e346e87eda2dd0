"""
In-memory implementation of the ExerciseCatalog port.

Seeded from a YAML dictionary (see shared/dictionaries/exercise_catalog.yaml).
Exact lookups compare normalized names and aliases; fuzzy lookups score every
name and alias with rapidfuzz and report the best candidate.
"""
import logging
import pathlib
from typing import Dict, Iterable, List, Optional, Tuple, Union

import yaml
from rapidfuzz import fuzz, process

from exercise_resolver.core.models import CatalogMatch, ExerciseRecord, MatchKind
from exercise_resolver.core.normalize import normalize_name

logger = logging.getLogger(__name__)

ROOT = pathlib.Path(__file__).resolve().parents[2]

# Fuzzy scores below this are not reported at all
MIN_FUZZY_SCORE = 0.5
# Fuzzy scores at or above this are reported as FUZZY, the rest as PARTIAL
FUZZY_KIND_SCORE = 0.8


def record_from_entry(entry: Dict) -> ExerciseRecord:
    """Build an ExerciseRecord from one YAML catalog entry."""
    name = entry["name"]
    return ExerciseRecord.create(
        id=str(entry.get("id") or normalize_name(name).replace(" ", "_")),
        name=name,
        visual_ref=entry.get("visual_ref") or entry.get("gif_url"),
        target_muscles=entry.get("target_muscles"),
        secondary_muscles=entry.get("secondary_muscles"),
        body_parts=entry.get("body_parts"),
        equipment=entry.get("equipment"),
        instructions=entry.get("instructions"),
        description=entry.get("description"),
    )


class InMemoryExerciseCatalog:
    """
    Static exercise catalog held in memory.

    Each record is indexed under its normalized name and every normalized
    alias. The first record to claim a key keeps it.
    """

    def __init__(
        self,
        records: Iterable[ExerciseRecord] = (),
        aliases: Optional[Dict[str, Iterable[str]]] = None,
    ):
        """
        Initialize with records and optional aliases keyed by record id.

        Args:
            records: Catalog records
            aliases: Alternative names per record id
        """
        aliases = aliases or {}
        self._index: Dict[str, ExerciseRecord] = {}
        for record in records:
            for key in [record.name, *aliases.get(record.id, ())]:
                normalized = normalize_name(key)
                if normalized and normalized not in self._index:
                    self._index[normalized] = record
        self._keys: List[str] = list(self._index)

    @classmethod
    def from_entries(cls, entries: Iterable[Dict]) -> "InMemoryExerciseCatalog":
        records = []
        aliases = {}
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("name"):
                logger.warning(f"Skipping malformed catalog entry: {entry!r}")
                continue
            record = record_from_entry(entry)
            records.append(record)
            aliases[record.id] = entry.get("aliases") or []
        return cls(records, aliases)

    @classmethod
    def from_yaml(cls, path: Union[str, pathlib.Path]) -> "InMemoryExerciseCatalog":
        """
        Load a catalog from a YAML list of entries.

        Relative paths are resolved against the project root.
        """
        path = pathlib.Path(path)
        if not path.is_absolute():
            path = ROOT / path

        entries = yaml.safe_load(path.read_text()) or []
        catalog = cls.from_entries(entries)
        logger.info(f"Loaded {len(catalog)} exercise catalog keys from {path}")
        return catalog

    def __len__(self) -> int:
        return len(self._keys)

    async def lookup(self, name: str, fuzzy: bool = False) -> Optional[CatalogMatch]:
        normalized = normalize_name(name or "")
        if not normalized:
            return None

        record = self._index.get(normalized)
        if record is not None:
            return CatalogMatch(record=record, confidence=1.0, match_kind=MatchKind.EXACT)

        if not fuzzy or not self._keys:
            return None

        best = self._best_fuzzy(normalized)
        if best is None:
            return None

        key, score = best
        kind = MatchKind.FUZZY if score >= FUZZY_KIND_SCORE else MatchKind.PARTIAL
        return CatalogMatch(record=self._index[key], confidence=score, match_kind=kind)

    def _best_fuzzy(self, normalized: str) -> Optional[Tuple[str, float]]:
        result = process.extractOne(normalized, self._keys, scorer=fuzz.token_sort_ratio)
        if not result:
            return None

        key, score, _ = result
        score = score / 100.0
        if score < MIN_FUZZY_SCORE:
            return None
        return key, score
