import re
from datetime import timedelta


class TimeParser:
    """
    Parses durations such as "250ms", "1.5s" or "1m30s" into seconds.

    The whole string must consist of number/unit pairs. Signs, unknown
    units and stray characters raise ValueError. A number without a unit
    is read as seconds.
    """

    _amount = re.compile(
        r"\s*(?P<val>\d+(\.\d+)?)\s*(?P<unit>ms|[smhdw])?\s*",
        flags=re.I,
    )

    def __init__(self, time_amount: str | int | float) -> None:
        self._units = {
            "ms": "milliseconds",
            "s": "seconds",
            "m": "minutes",
            "h": "hours",
            "d": "days",
            "w": "weeks",
        }

        self.time = self.parse(time_amount)

    def parse(self, time_amount: str | int | float) -> float:
        if isinstance(time_amount, (int, float)):
            return float(time_amount)

        text = time_amount.strip()
        if len(text) < 1:
            raise ValueError(f"Err. - could not parse time amount {time_amount!r}")

        duration = timedelta()
        position = 0

        while position < len(text):
            match = self._amount.match(text, position)
            if match is None:
                raise ValueError(f"Err. - could not parse time amount {time_amount!r}")

            unit = self._units[(match.group("unit") or "s").lower()]
            duration += timedelta(**{unit: float(match.group("val"))})

            position = match.end()

        return duration.total_seconds()
