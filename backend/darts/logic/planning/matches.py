from datetime import datetime

from heliclockter import timedelta

from darts.config import config

SCHEDULED_TIME_FORMAT = "%H:%M:%S"


def calculate_match_time(round_: int, position: int) -> str:
    """
    Returns the time of day a match is planned to be played, formatted as HH:MM:SS.

    Every round starts a fixed interval after the previous one and matches within a round are
    spread out by another fixed interval. Times wrap around past midnight.
    """
    base_time = datetime.strptime(config.schedule_base_time, SCHEDULED_TIME_FORMAT)
    offset = timedelta(
        minutes=config.round_interval_minutes * (round_ - 1)
        + config.position_interval_minutes * (position - 1)
    )
    return (base_time + offset).strftime(SCHEDULED_TIME_FORMAT)
