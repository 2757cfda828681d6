import logging
from typing import Iterable, Iterator

from .notification import Dimension

logger = logging.getLogger(__name__)


def find_target_groups(dimensions: Iterable[Dimension], marker: str) -> Iterator[str]:
    """Yield the value of every dimension named ``marker``.

    Each dimension is logged before it is handed on, matching or not.
    """
    for dimension in dimensions:
        logger.info(f"Resource name is {dimension.name}, value is {dimension.value}")
        if dimension.name == marker:
            yield dimension.value
