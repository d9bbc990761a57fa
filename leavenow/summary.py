from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

# Arriving within this margin of the target counts as running late
LATE_MARGIN = timedelta(minutes=10)


@dataclass(frozen=True)
class TravelSummary:
    header: str
    minutes: str
    route_line: str
    status: Optional[str] = None

    def render(self):
        lines = [self.header, f"{self.minutes} mins", self.route_line]
        if self.status:
            lines.append(f"({self.status})")
        return "\n".join(lines)


def format_summary(info) -> TravelSummary:
    status = None
    if info.arrival_estimate is not None and info.arrival_target_time is not None:
        status = "late" if info.arrival_estimate + LATE_MARGIN > info.arrival_target_time else "on time"

    return TravelSummary(
        header=info.destination_name,
        minutes=str(info.travel_minutes).zfill(2),
        route_line=f"Using {info.route_name}",
        status=status,
    )
