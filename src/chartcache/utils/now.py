from datetime import UTC, datetime


class Now:
    @staticmethod
    def as_datetime() -> datetime:
        """Return the current UTC time as a datetime object."""

        return datetime.now(UTC)

    @staticmethod
    def matching(reference: datetime | None) -> datetime:
        """Return the current time, naive or aware to match ``reference``."""

        if reference is not None and reference.tzinfo is None:
            return datetime.now()
        return datetime.now(UTC)

    @staticmethod
    def to_utc(dt: datetime | None) -> datetime | None:
        """Convert an aware datetime to UTC; naive values are returned unchanged."""

        if dt is None or dt.tzinfo is None:
            return dt
        return dt.astimezone(UTC)
