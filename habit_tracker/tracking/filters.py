"""
Category Filter Pipeline

Turns the tracker inventory into the ordered list of categories the
presentation layer renders for one calendar day.

Stages, always in this order:
1. recurrence match (is the tracker due on the day?)
2. completion state (any / completed on the day / not completed on the day)
3. case-insensitive title search
4. drop categories left empty
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence
import logging

from habit_tracker import config
from habit_tracker.exceptions import HabitTrackerError
from habit_tracker.models.tracker import Tracker, TrackerCategory
from habit_tracker.tracking.ledger import CompletionLedger
from habit_tracker.tracking.recurrence import is_due
from habit_tracker.utils.calendar import DayLike, start_of_day

logger = logging.getLogger(__name__)

CompletionPredicate = Callable[[Tracker], bool]


class FilterMode(str, Enum):
    """Filter modes offered to the user"""
    ALL = "all"
    TODAY = "today"
    COMPLETED = "completed"
    UNCOMPLETED = "uncompleted"


def any_completion(tracker: Tracker) -> bool:
    return True


def must_be_completed_on(ledger: CompletionLedger, day: DayLike) -> CompletionPredicate:
    day = start_of_day(day)
    return lambda tracker: ledger.contains(tracker.id, day)


def must_not_be_completed_on(ledger: CompletionLedger, day: DayLike) -> CompletionPredicate:
    day = start_of_day(day)
    return lambda tracker: not ledger.contains(tracker.id, day)


def completion_predicate(mode: FilterMode, ledger: CompletionLedger, day: DayLike) -> CompletionPredicate:
    """Select the completion-state predicate for a filter mode"""
    if mode == FilterMode.COMPLETED:
        return must_be_completed_on(ledger, day)
    if mode == FilterMode.UNCOMPLETED:
        return must_not_be_completed_on(ledger, day)
    # ALL and TODAY only differ in which day is used
    return any_completion


def sort_categories(categories: Iterable[TrackerCategory]) -> List[TrackerCategory]:
    """Pinned pseudo-category first, the rest alphabetically by title"""
    pinned_title = config.PINNED_CATEGORY_TITLE
    return sorted(
        categories,
        key=lambda category: (category.title != pinned_title, category.title),
    )


def build_categories(
    trackers: Iterable[Tracker],
    extra_titles: Iterable[str] = (),
) -> List[TrackerCategory]:
    """
    Group trackers into categories

    Pinned trackers go to the synthetic pinned category; the rest go to their
    original category, or the default category when they have none. Titles in
    extra_titles are included even when they hold no trackers.

    Args:
        trackers: Tracker inventory, in display order
        extra_titles: Explicitly created category titles

    Returns:
        Categories sorted pinned-first, then alphabetically
    """
    trackers = list(trackers)
    grouped: Dict[str, List[Tracker]] = {}
    pinned = [tracker for tracker in trackers if tracker.is_pinned]
    if pinned:
        grouped[config.PINNED_CATEGORY_TITLE] = pinned

    for tracker in trackers:
        if tracker.is_pinned:
            continue
        title = tracker.original_category or config.DEFAULT_CATEGORY_TITLE
        grouped.setdefault(title, []).append(tracker)

    for title in extra_titles:
        grouped.setdefault(title, [])

    return sort_categories(
        TrackerCategory(title=title, trackers=tuple(members))
        for title, members in grouped.items()
    )


class CategoryFilterPipeline:
    """
    Ordered filter over a category collection.

    Keeps the last successful result so a failing completion lookup degrades
    to the previous view instead of raising into the presentation layer.
    """

    def __init__(self, ledger: CompletionLedger):
        self.ledger = ledger
        self._last_result: List[TrackerCategory] = []

    @property
    def last_result(self) -> List[TrackerCategory]:
        return list(self._last_result)

    def apply(
        self,
        categories: Sequence[TrackerCategory],
        day: DayLike,
        completion: Optional[CompletionPredicate] = None,
        search_text: str = "",
    ) -> List[TrackerCategory]:
        """
        Filter categories for a day

        Args:
            categories: Categories to filter
            day: Reference calendar day
            completion: Completion-state predicate (defaults to any)
            search_text: Case-insensitive title substring; empty disables it

        Returns:
            Non-empty categories, pinned first then alphabetical
        """
        day = start_of_day(day)
        completion = completion or any_completion
        query = search_text.lower()

        try:
            filtered = []
            for category in categories:
                trackers = [
                    tracker for tracker in category.trackers
                    if is_due(tracker, day, self.ledger)
                ]
                trackers = [tracker for tracker in trackers if completion(tracker)]
                if query:
                    trackers = [
                        tracker for tracker in trackers
                        if query in tracker.title.lower()
                    ]
                if trackers:
                    filtered.append(TrackerCategory(title=category.title, trackers=tuple(trackers)))
        except HabitTrackerError:
            logger.warning(
                f"Filtering failed for {day.isoformat()}, keeping previous view",
                exc_info=True
            )
            return self.last_result

        result = sort_categories(filtered)
        self._last_result = result
        logger.debug(
            f"Filtered {day.isoformat()}: {len(result)} categories, "
            f"{sum(len(c.trackers) for c in result)} trackers"
        )
        return list(result)
