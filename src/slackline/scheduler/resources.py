"""Per-resource daily booking ledger used by leveling."""

from collections import defaultdict

from slackline.logger import get_logger

logger = get_logger()


class ResourceLedger:
    """Tracks booked hours per working-day offset for a single resource.

    The ledger is local to one leveling call and is not shared or reentrant.
    """

    def __init__(self, capacity: float, resource_id: str = "") -> None:
        """Initialize an empty ledger.

        Args:
            capacity: Hours the resource can work per day
            resource_id: Resource id (for verbose logging)
        """
        self.capacity = capacity
        self.resource_id = resource_id
        self.booked: defaultdict[int, float] = defaultdict(float)

    def fits(self, start: int, duration: int, hours_per_day: float) -> bool:
        """Check if ``hours_per_day`` more hours fit on every day of the window.

        Args:
            start: First day offset
            duration: Number of working days
            hours_per_day: Additional daily load

        Returns:
            True if no day would exceed capacity
        """
        return all(
            self.booked.get(day, 0.0) + hours_per_day <= self.capacity
            for day in range(start, start + duration)
        )

    def book(self, start: int, duration: int, hours_per_day: float) -> list[int]:
        """Commit load for the window.

        Returns:
            Day offsets that are now over capacity
        """
        overloaded: list[int] = []
        for day in range(start, start + duration):
            self.booked[day] += hours_per_day
            if self.booked[day] > self.capacity:
                overloaded.append(day)
        if overloaded:
            logger.debug(f"    {self.resource_id} over capacity on days {overloaded}")
        return overloaded

    def peak(self) -> float:
        """Highest booked load on any day."""
        return max(self.booked.values(), default=0.0)

    def total_hours(self) -> float:
        return sum(self.booked.values())
