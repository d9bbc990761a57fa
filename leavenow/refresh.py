from datetime import timedelta

REFRESH_FLOOR = timedelta(minutes=5)


def next_refresh_time(info, now):
    """
    Earliest time the next planning cycle should run.

    Refreshing starts at the target time less twice the travel time, and
    never sooner than five minutes from now.
    """
    candidate = now
    if info.arrival_target_time is not None and info.arrival_estimate is not None:
        candidate = info.arrival_target_time - 2 * timedelta(seconds=info.route_time_seconds)

    if candidate < now + REFRESH_FLOOR:
        return now + REFRESH_FLOOR
    return candidate
