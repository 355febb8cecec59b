"""Static BIN and benefit catalog loaded from a JSON data source."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


class CatalogError(RuntimeError):
    pass


@dataclass(frozen=True)
class Benefit:
    id: str
    name: str
    category: str
    tnc: str
    icon: str = "circle"

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class CardIdentification:
    bin: str
    tier: str
    issuer: str


class Catalog:
    """Read-only lookup tables for BIN prefixes and tier benefits."""

    def __init__(
        self,
        bins: Dict[str, Dict[str, str]],
        tier_names: Dict[str, str],
        benefits: Dict[str, List[Benefit]],
    ):
        self._bins = dict(bins)
        self._tier_names = dict(tier_names)
        self._benefits = {tier: tuple(items) for tier, items in benefits.items()}

    @property
    def tiers(self) -> List[str]:
        return list(self._tier_names)

    def has_tier(self, tier: str) -> bool:
        return tier in self._tier_names

    def tier_name(self, tier: str) -> str:
        return self._tier_names.get(tier, tier)

    def lookup_bin(self, bin_prefix: str) -> Optional[CardIdentification]:
        entry = self._bins.get(bin_prefix)
        if entry is None:
            return None
        return CardIdentification(bin=bin_prefix, tier=entry["tier"], issuer=entry["issuer"])

    def example_bins(self, limit: int = 3) -> List[str]:
        return list(self._bins)[:limit]

    def benefits_for_tier(self, tier: str) -> List[Benefit]:
        return list(self._benefits.get(tier, ()))

    def compare(self, tiers: Iterable[str]) -> Dict[str, Any]:
        selected = list(dict.fromkeys(tiers))
        categories: List[str] = []
        for tier in selected:
            for benefit in self._benefits.get(tier, ()):
                if benefit.category not in categories:
                    categories.append(benefit.category)

        rows = []
        for category in categories:
            rows.append(
                {
                    "category": category,
                    "tiers": {
                        tier: [
                            b.to_dict()
                            for b in self._benefits.get(tier, ())
                            if b.category == category
                        ]
                        for tier in selected
                    },
                }
            )
        return {
            "tiers": [
                {
                    "tier": tier,
                    "name": self.tier_name(tier),
                    "benefitCount": len(self._benefits.get(tier, ())),
                }
                for tier in selected
            ],
            "categories": rows,
        }


def _parse_benefit(raw: Any, tier: str) -> Benefit:
    if not isinstance(raw, dict):
        raise CatalogError(f"benefit entries for tier {tier!r} must be objects")
    try:
        return Benefit(
            id=str(raw["id"]),
            name=str(raw["name"]),
            category=str(raw["category"]),
            tnc=str(raw["tnc"]),
            icon=str(raw.get("icon") or "circle"),
        )
    except KeyError as exc:
        raise CatalogError(f"benefit in tier {tier!r} is missing {exc.args[0]!r}") from exc


def catalog_from_dict(data: Dict[str, Any]) -> Catalog:
    tiers_raw = data.get("tiers")
    bins_raw = data.get("bins")
    if not isinstance(tiers_raw, dict) or not isinstance(bins_raw, dict):
        raise CatalogError("catalog must define 'bins' and 'tiers' objects")

    tier_names: Dict[str, str] = {}
    benefits: Dict[str, List[Benefit]] = {}
    seen_ids = set()
    for tier, tier_data in tiers_raw.items():
        if not isinstance(tier_data, dict):
            raise CatalogError(f"tier {tier!r} must be an object")
        tier_names[tier] = str(tier_data.get("name") or tier)
        parsed = [_parse_benefit(item, tier) for item in tier_data.get("benefits") or []]
        for benefit in parsed:
            if benefit.id in seen_ids:
                raise CatalogError(f"duplicate benefit id {benefit.id!r}")
            seen_ids.add(benefit.id)
        benefits[tier] = parsed

    bins: Dict[str, Dict[str, str]] = {}
    for prefix, entry in bins_raw.items():
        if len(prefix) != 4 or not prefix.isdigit():
            raise CatalogError(f"BIN {prefix!r} must be exactly four digits")
        if not isinstance(entry, dict) or entry.get("tier") not in tier_names:
            raise CatalogError(f"BIN {prefix!r} must reference a known tier")
        bins[prefix] = {"tier": entry["tier"], "issuer": str(entry.get("issuer") or "")}

    return Catalog(bins, tier_names, benefits)


def load_catalog(path: Path) -> Catalog:
    try:
        with open(path, encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        raise CatalogError(f"unable to read catalog from {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogError("catalog root must be an object")
    return catalog_from_dict(data)
