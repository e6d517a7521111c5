"""Row inference, normalization, upstream sources, and the in-memory row buffer."""
from .errors import DashboardError, TableUnavailable, FetchFailure
from .infer import find_key, infer_role_keys
from .normalize import coerce_number, parse_date, month_bucket, normalize_row
from .schemas import RoleKeys, NormalizedRow, MonthlyAggregate, CategoryAggregate, InsightData
from .source import MemorySource, RestSource
from .store import DataStore
