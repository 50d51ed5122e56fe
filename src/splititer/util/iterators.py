"""Split one iterator into two lazy iterators according to a predicate.

The left iterator yields the items for which the predicate is false, the
right iterator yields the items for which it is true.  Both share one
state object which pulls from the source only when a consumer asks for
an item, so the source is traversed exactly once and in order no matter
how the two consumers are interleaved.

Example:
    >>> odd, even = split(range(1, 10), lambda v: v % 2 == 0)
    >>> list(odd)
    [1, 3, 5, 7, 9]
    >>> list(even)
    [2, 4, 6, 8]
"""
import logging
import threading
from collections import deque
from contextlib import nullcontext
from enum import Enum
from typing import Any, Callable, Deque, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from splititer.util.config import get_split_settings

logger = logging.getLogger(__name__)

T = TypeVar('T')

NO_ITEM = object()


class Side(Enum):
    """Which of the two split iterators a request concerns."""
    LEFT = False   # predicate returned false
    RIGHT = True   # predicate returned true

    @classmethod
    def of(cls, value: Any) -> 'Side':
        return cls.RIGHT if value else cls.LEFT

    @property
    def opposite(self) -> 'Side':
        return Side.LEFT if self is Side.RIGHT else Side.RIGHT


class SplitPoisonedError(RuntimeError):
    """Raised when a split is used after its predicate or source failed."""


class SharedSplitState(Generic[T]):
    """State shared by the left and right `Split` of one source.

    Items pulled from the source that belong to the side not currently asking
    are kept in `cache` until the other side asks for them.  The cache only
    ever holds items for one side, recorded in `cached_side`.
    """

    def __init__(self, iterable: Iterable[T], predicate: Callable[[T], Any], threadsafe: bool = False):
        self.source: Optional[Iterator[T]] = iter(iterable)
        self.predicate: Optional[Callable[[T], Any]] = predicate
        self.cache: Deque[T] = deque()
        self.cached_side = Side.LEFT
        self.exhausted = False
        self.poisoned_by: Optional[BaseException] = None
        self._lock = threading.RLock() if threadsafe else nullcontext()
        self._busy = False

    @property
    def threadsafe(self) -> bool:
        return not isinstance(self._lock, nullcontext)

    def pending(self, side: Side) -> int:
        """Number of cached items waiting to be returned to `side`."""
        return len(self.cache) if self.cached_side is side else 0

    def next_for(self, side: Side):
        """Return the next item for `side`, or `NO_ITEM` once none remain.

        Raises:
            SplitPoisonedError: If an earlier call failed part way through.
            RuntimeError: If called from inside the predicate or the source
                while another call is in progress.
        """
        with self._lock:
            if self._busy:
                raise RuntimeError("Split iterator advanced re-entrantly from its own predicate or source")
            if self.poisoned_by is not None:
                raise SplitPoisonedError("Split is unusable after an earlier failure") from self.poisoned_by

            self._busy = True
            try:
                return self._advance(side)
            except BaseException as e:
                self._poison(e)
                raise
            finally:
                self._busy = False

    def _advance(self, side: Side):
        if self.cached_side is side and self.cache:
            return self.cache.popleft()

        if self.exhausted:
            return NO_ITEM

        for item in self.source:
            try:
                result = self.predicate(item)
            except StopIteration as e:
                # Would otherwise read as clean exhaustion of the calling Split
                raise RuntimeError("split predicate raised StopIteration") from e
            if Side.of(result) is side:
                return item
            self.cached_side = side.opposite
            self.cache.append(item)

        self._exhaust()
        return NO_ITEM

    def _exhaust(self):
        logger.debug(f"Split source exhausted with {len(self.cache)} item(s) cached for {self.cached_side.name}")
        self.exhausted = True
        self.source = None
        self.predicate = None

    def _poison(self, error: BaseException):
        logger.error(f"Split poisoned by {type(error).__name__}: {error}")
        self.poisoned_by = error
        self.cache.clear()
        self.source = None
        self.predicate = None


class Split(Generic[T]):
    """One of a pair of iterators produced by `split`.

    The left one yields items for which the predicate is false, the right one
    items for which it is true.  Iterator adaptors are lazy; nothing is read
    from the source until one of the pair is advanced.
    """

    def __init__(self, shared: SharedSplitState[T], side: Side):
        self._shared = shared
        self.side = side

    @property
    def is_right(self) -> bool:
        return self.side is Side.RIGHT

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        item = self._shared.next_for(self.side)
        if item is NO_ITEM:
            raise StopIteration
        return item

    def __repr__(self):
        return f"Split(side={self.side.name}, iter={self._shared.source!r})"


def split(iterable: Iterable[T],
          predicate: Callable[[T], Any],
          threadsafe: Optional[bool] = None) -> Tuple[Split[T], Split[T]]:
    """Split `iterable` into two lazy iterators.

    Args:
        iterable: Any iterable; it is consumed once, on demand.
        predicate: Called once per item.  Items for which it returns a falsy
            value go to the left iterator, truthy to the right one.
        threadsafe: Guard the shared state with a lock so the two iterators can
            be drained from different threads.  If None, the `split_threadsafe`
            config setting decides.

    Returns:
        Tuple[Split, Split]: The (left, right) iterators.
    """
    if threadsafe is None:
        threadsafe = get_split_settings().threadsafe

    shared = SharedSplitState(iterable, predicate, threadsafe=threadsafe)
    logger.debug(f"Created split over {shared.source!r} (threadsafe={threadsafe})")
    return Split(shared, Side.LEFT), Split(shared, Side.RIGHT)


def partition(iterable: Iterable[T], predicate: Callable[[T], Any]) -> Tuple[List[T], List[T]]:
    """Split `iterable` eagerly into (false items, true items) lists."""
    left, right = split(iterable, predicate, threadsafe=False)
    return list(left), list(right)


class Splittable(Generic[T]):
    """Wrap an iterable so it can be split fluently.

    Examples:
        >>> low, high = Splittable(range(1, 20)).split(lambda v: v >= 10)
        >>> list(high)[:3]
        [10, 11, 12]
    """

    def __init__(self, iterable: Iterable[T]):
        self.iterable = iterable

    def __iter__(self) -> Iterator[T]:
        return iter(self.iterable)

    def split(self, predicate: Callable[[T], Any], threadsafe: Optional[bool] = None) -> Tuple[Split[T], Split[T]]:
        return split(self.iterable, predicate, threadsafe=threadsafe)
