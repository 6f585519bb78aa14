from attr import dataclass

from ga4cli.dates import DateRange


@dataclass(frozen=True)
class PathVariants:
    path: str
    variants: tuple[str, ...]
    base_path: str


@dataclass(frozen=True)
class PathQuery:
    raw_path: str
    date_range: DateRange
