"""Ingestion helpers and the competitor registry."""

from __future__ import annotations

import pathlib
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

import yaml

COMPETITORS_PATH = pathlib.Path(__file__).with_name("competitors.yml")


class UnknownBrandError(KeyError):
    def __init__(self, brand: str | None, valid_brands: tuple[str, ...]) -> None:
        super().__init__(brand)
        self.brand = brand
        self.valid_brands = valid_brands


class CompetitorRegistry:
    """Read-only brand key -> ordered competitor names lookup."""

    def __init__(self, data: Mapping[str, list[str]]) -> None:
        self._competitors: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {brand: tuple(names) for brand, names in data.items()}
        )

    @property
    def brands(self) -> tuple[str, ...]:
        return tuple(self._competitors)

    def __contains__(self, brand: object) -> bool:
        return brand in self._competitors

    def competitors_for(self, brand: str | None) -> tuple[str, ...]:
        if not brand or brand not in self._competitors:
            raise UnknownBrandError(brand, self.brands)
        return self._competitors[brand]


def load_competitors(path: pathlib.Path = COMPETITORS_PATH) -> CompetitorRegistry:
    data = yaml.safe_load(path.read_text())
    return CompetitorRegistry(data)


@lru_cache(maxsize=1)
def get_registry() -> CompetitorRegistry:
    return load_competitors()
