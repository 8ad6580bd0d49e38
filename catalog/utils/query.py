"""Translation of an HTTP query string into a MongoDB query.

Follows the query-to-mongo convention::

    /products?brand=Acme,Globex&price>=10&price<100&sort=-price&skip=10&limit=10

``brand`` becomes an ``$in`` filter, the two ``price`` comparisons are merged
into one range, ``sort`` orders by descending price and ``skip``/``limit``
select the page. ``MongoQuery.links`` builds first/prev/next/last URLs for
the page, keeping every filter parameter of the original request.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote_plus

from catalog.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from catalog.utils.exceptions import ValidationError

SKIP_KEYS = ("skip", "offset")
RESERVED_KEYS = ("sort", "limit") + SKIP_KEYS

_EXPRESSION = re.compile(r"^(?P<negate>!)?(?P<field>[^<>!=]+)(?:(?P<op><=|>=|!=|<|>|=)(?P<value>.*))?$", re.DOTALL)
_REGEX = re.compile(r"^/(?P<pattern>.*)/(?P<options>[imxs]*)$", re.DOTALL)
_INTEGER = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?\d*\.\d+$")
_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")

_OPERATORS = {">": "$gt", ">=": "$gte", "<": "$lt", "<=": "$lte"}


@dataclass
class MongoQuery:
    criteria: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[List[Tuple[str, int]]] = None
    skip: int = 0
    limit: int = DEFAULT_PAGE_LIMIT
    # Encoded filter parameters, replayed verbatim in pagination links
    filters: List[str] = field(default_factory=list)

    def links(self, url: str, total: int) -> Dict[str, str]:
        limit = min(self.limit, total)
        links: Dict[str, str] = {}
        if not limit:
            return links

        if self.skip > 0:
            links["prev"] = self._page_url(url, max(self.skip - limit, 0))
            links["first"] = self._page_url(url, 0)

        if self.skip + limit < total:
            last_skip = (math.ceil(total / limit) - 1) * limit
            links["next"] = self._page_url(url, min(self.skip + limit, last_skip))
            links["last"] = self._page_url(url, last_skip)

        return links

    def _page_url(self, url: str, skip: int) -> str:
        params = list(self.filters)
        if self.sort:
            params.append("sort=" + ",".join(("-" if direction < 0 else "") + name for name, direction in self.sort))
        params.append(f"skip={skip}")
        params.append(f"limit={self.limit}")
        return f"{url}?{'&'.join(params)}"


def coerce_value(value: str) -> Any:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    if value == "true":
        return True
    if value == "false":
        return False
    if value == "null":
        return None
    if _INTEGER.match(value):
        return int(value)
    if _FLOAT.match(value):
        return float(value)
    if _DATE.match(value):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def _regex(value: str) -> Optional[Dict[str, str]]:
    match = _REGEX.match(value)
    if not match:
        return None
    regex = {"$regex": match.group("pattern")}
    if match.group("options"):
        regex["$options"] = match.group("options")
    return regex


def _parse_sort(value: str) -> List[Tuple[str, int]]:
    sort = []
    for name in value.split(","):
        name = name.strip()
        if not name:
            continue
        _check_field_name(name.lstrip("+-"))
        if name[0] in "+-":
            sort.append((name[1:], -1 if name[0] == "-" else 1))
        else:
            sort.append((name, 1))
    return sort


def _invalid(name: str, msg: str) -> ValidationError:
    return ValidationError(f"{name}: {msg}", [{"field": name, "msg": msg}])


def _check_field_name(name: str) -> None:
    # Operator keys such as $where or a.$ne must never reach the store as field names
    if any(segment.startswith("$") for segment in name.split(".")):
        raise _invalid(name, "operator field names are not allowed")


def _parse_count(name: str, value: str) -> int:
    if not _INTEGER.match(value) or int(value) < 0:
        raise _invalid(name, "must be a non-negative integer")
    return int(value)


def _add_condition(criteria: Dict[str, Any], name: str, op: str, value: str) -> None:
    if op == "=":
        regex = _regex(value)
        if regex:
            criteria[name] = regex
        elif "," in value:
            criteria[name] = {"$in": [coerce_value(v) for v in value.split(",")]}
        else:
            criteria[name] = coerce_value(value)
        return

    condition = criteria.get(name)
    if not isinstance(condition, dict) or "$regex" in condition:
        condition = {}
        criteria[name] = condition

    if op == "!=":
        regex = _regex(value)
        if regex:
            condition["$not"] = re.compile(regex["$regex"], _regex_flags(regex.get("$options", "")))
        elif "," in value:
            condition["$nin"] = [coerce_value(v) for v in value.split(",")]
        else:
            condition["$ne"] = coerce_value(value)
    else:
        condition[_OPERATORS[op]] = coerce_value(value)


def _regex_flags(options: str) -> int:
    flags = 0
    for option, flag in (("i", re.IGNORECASE), ("m", re.MULTILINE), ("x", re.VERBOSE), ("s", re.DOTALL)):
        if option in options:
            flags |= flag
    return flags


def parse_query(query_string: str, default_limit: int = DEFAULT_PAGE_LIMIT, max_limit: int = MAX_PAGE_LIMIT) -> MongoQuery:
    """Build a MongoQuery from a raw (still URL-encoded) query string."""
    query = MongoQuery(limit=default_limit)

    for part in query_string.split("&"):
        if not part:
            continue
        match = _EXPRESSION.match(unquote_plus(part))
        if not match:
            raise ValidationError(f"Unsupported query parameter: {unquote_plus(part)}")

        name = match.group("field").strip()
        op = match.group("op")
        value = match.group("value")

        _check_field_name(name)
        if match.group("negate") and op is not None:
            raise _invalid(name, "negation cannot be combined with an operator")

        if op == "=" and name in RESERVED_KEYS:
            if name == "sort":
                query.sort = _parse_sort(value) or None
            elif name == "limit":
                limit = _parse_count(name, value)
                query.limit = min(limit, max_limit) if limit else default_limit
            else:
                query.skip = _parse_count(name, value)
            continue

        query.filters.append(part)
        if op is None:
            query.criteria[name] = {"$exists": not match.group("negate")}
        else:
            _add_condition(query.criteria, name, op, value)

    return query
