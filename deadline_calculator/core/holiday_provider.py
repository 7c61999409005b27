"""
Holiday provider using the holidays library for Brazil and its states.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import holidays
from holidays.constants import OPTIONAL, PUBLIC

from deadline_calculator.data.holiday_data import DEFAULT_HOLIDAY_YEARS, default_registry
from deadline_calculator.data.loader import HolidayFileLoader
from deadline_calculator.data.schemas import Config, HolidayException, HolidayRegistry
from deadline_calculator.i18n import Translator
from deadline_calculator.i18n.translations import get_translation

logger = logging.getLogger(__name__)

RECESS_NAME = get_translation("holiday.recess", "pt")

# Narration language -> holidays library language
HOLIDAY_LANGUAGES = {"pt": "pt_BR", "en": "en_US"}


def years_spanned(start: date, day_count: int) -> range:
    """Years a deadline starting at ``start`` may reach, with slack for extensions."""
    last = min(start.year + 1 + max(day_count, 0) // 180, date.max.year)
    return range(start.year, last + 1)


class HolidayProvider:
    """Builds holiday registry snapshots for Brazilian courts."""

    def __init__(
        self,
        language: str = "pt_BR",
        subdivision: Optional[str] = None,
        include_optional: bool = False,
    ):
        """
        Initialize the holiday provider.

        Args:
            language: Language for holiday names ('pt_BR' or 'en_US').
            subdivision: Optional state code (e.g. 'SP') adding state holidays.
            include_optional: Also include optional holidays such as Carnaval.
        """
        self.language = HOLIDAY_LANGUAGES.get(language, language)
        self.subdivision = subdivision.upper() if subdivision else None
        self.include_optional = include_optional
        self.recess_name = Translator(self.language)("holiday.recess")
        self._cache: Dict[tuple, HolidayRegistry] = {}

    def national_registry(self, years: Iterable[int]) -> HolidayRegistry:
        """
        Get national (and state, if configured) holidays for some years.

        Args:
            years: Years to include.

        Returns:
            HolidayRegistry ordered by date.
        """
        year_key = tuple(sorted(set(years)))
        cache_key = ("national", year_key, self.subdivision, self.language, self.include_optional)
        if cache_key in self._cache:
            return self._cache[cache_key]

        categories: Tuple[str, ...] = (PUBLIC, OPTIONAL) if self.include_optional else (PUBLIC,)
        br_holidays = holidays.Brazil(
            subdiv=self.subdivision,
            years=year_key,
            language=self.language,
            categories=categories,
        )

        registry = HolidayRegistry(
            holidays=tuple(
                HolidayException(date=holiday_date, name=name)
                for holiday_date, name in sorted(br_holidays.items())
            )
        )
        logger.debug(f"Loaded {len(registry)} library holidays for {year_key}")

        self._cache[cache_key] = registry
        return registry

    def forensic_recess_registry(self, years: Iterable[int]) -> HolidayRegistry:
        """
        Express the 20/12 - 20/01 recess as ordinary registry entries.

        For each year, 1-20 January and 20-31 December of that year are
        included.

        Args:
            years: Calendar years to cover.

        Returns:
            HolidayRegistry with one entry per recess day.
        """
        year_key = tuple(sorted(set(years)))
        cache_key = ("recess", year_key, self.recess_name)
        if cache_key in self._cache:
            return self._cache[cache_key]

        entries: List[HolidayException] = []
        for year in year_key:
            entries.extend(self._recess_days(date(year, 1, 1), date(year, 1, 20)))
            entries.extend(self._recess_days(date(year, 12, 20), date(year, 12, 31)))

        registry = HolidayRegistry(holidays=tuple(entries))
        self._cache[cache_key] = registry
        return registry

    def registry_for_years(
        self, years: Iterable[int], include_recess: bool = False
    ) -> HolidayRegistry:
        """Library holidays for some years, optionally followed by the recess."""
        years = list(years)
        registry = self.national_registry(years)
        if include_recess:
            registry = registry.merged(self.forensic_recess_registry(years))
        return registry

    def registry_for_range(
        self, start: date, end: date, include_recess: bool = False
    ) -> HolidayRegistry:
        """
        Get a registry covering every year touched by a date range.

        Args:
            start: Start date of the range.
            end: End date of the range.
            include_recess: Whether to add forensic recess entries.

        Returns:
            HolidayRegistry for the years from start.year to end.year.
        """
        if end < start:
            raise ValueError("end must be after or equal to start")
        return self.registry_for_years(range(start.year, end.year + 1), include_recess)

    def _recess_days(self, first: date, last: date) -> List[HolidayException]:
        """One recess entry per day in [first, last]."""
        days = []
        current = first
        while current <= last:
            days.append(HolidayException(date=current, name=self.recess_name))
            current += timedelta(days=1)
        return days

    def clear_cache(self) -> None:
        """Clear the holiday cache."""
        self._cache.clear()


def registry_from_config(config: Config, years: Iterable[int]) -> HolidayRegistry:
    """
    Resolve the configured holiday source into a registry snapshot.

    Args:
        config: Loaded configuration.
        years: Years the computation may touch (used by the library source
            and the recess entries).

    Returns:
        HolidayRegistry for the configured source.

    Raises:
        ValueError: If the 'file' source has no holiday_file configured.
    """
    years = list(years)
    source = config.holiday_source

    if source == "default":
        uncovered = sorted(set(years) - set(DEFAULT_HOLIDAY_YEARS))
        if uncovered:
            logger.warning(
                f"Static default holidays only cover {list(DEFAULT_HOLIDAY_YEARS)}; "
                f"holidays for {uncovered} are missing. Use holiday_source 'library'."
            )
        registry = default_registry()
    elif source == "library":
        provider = HolidayProvider(
            language=config.language, subdivision=config.subdivision
        )
        registry = provider.national_registry(years)
    elif source == "file":
        if not config.holiday_file:
            raise ValueError("holiday_source 'file' requires holiday_file to be set")
        registry = HolidayFileLoader().load(config.holiday_file)
    else:
        registry = HolidayRegistry()

    if config.include_forensic_recess:
        registry = registry.merged(
            HolidayProvider(language=config.language).forensic_recess_registry(years)
        )

    return registry
