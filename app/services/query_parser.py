import re
from typing import Dict, List, Tuple

from app.models import FilterKey

# key:"quoted phrase" | key:token | bare token
TERM_RE = re.compile(r'\w+:"[^"]+"|\w+:\S+|\S+')

FilterSet = Dict[FilterKey, List[str]]


def tokenize(raw: str) -> List[str]:
    """
    Splits a raw search string into terms, keeping `key:"quoted phrase"`
    together. Casing is preserved.
    """
    return TERM_RE.findall(raw or "")


def split_term(term: str) -> Tuple[str, str]:
    """
    Splits a term on its first colon only, so `title:foo:bar` gives
    ('title', 'foo:bar'). A term without a colon is a title value.
    """
    if ":" not in term:
        return FilterKey.TITLE.value, term
    key, _, value = term.partition(":")
    return key, value


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def empty_filter_set() -> FilterSet:
    return {key: [] for key in FilterKey}


def classify(terms: List[str]) -> FilterSet:
    """
    Sorts terms into the seven filter keys.

    Values are unquoted, split on '%', trimmed and lowercased. A term whose
    key is not recognized is kept whole (lowercased, not split) as a title
    value. Repeated values are kept as they are.
    """
    filters = empty_filter_set()
    for term in terms:
        key_text, raw_value = split_term(term)
        key = FilterKey.parse(key_text)
        if key is None:
            filters[FilterKey.TITLE].append(term.lower())
            continue
        values = [v.strip().lower() for v in strip_quotes(raw_value).split("%")]
        filters[key].extend(values)
    return filters


def parse_query(raw: str) -> FilterSet:
    return classify(tokenize(raw))
