"""
External identifier normalization and canonical-id selection.

Input dumps spell identifiers in several ways. Each raw value is classified
into one of these shapes and decoded once, here:

- bare string                      "https://ror.org/05gq02987"
- canonical                        {"scheme": "ror", "value": "...", "preferred": true}
- vocabulary output                {"scheme": "ror", "identifier": "..."}
- legacy                           {"type": "isni", "id": "..."}
- ROR v2 external id               {"type": "isni", "all": [...], "preferred": "..."}
- ROR v1 external id map           {"ISNI": {"all": [...], "preferred": ...}, ...}

Anything else is captured as a string under the `other` scheme with a warning.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Sequence

from vocab.errors import MissingIdentifierError
from vocab.models import ExternalIdentifier, IdentifierScheme

SCHEME_PATTERNS: list[tuple[IdentifierScheme, re.Pattern[str]]] = [
    (IdentifierScheme.ROR, re.compile(r"^(?:https?://)?ror\.org/0[a-z0-9]{8}$", re.IGNORECASE)),
    (IdentifierScheme.ROR, re.compile(r"^0[a-hj-km-np-tv-z0-9]{6}[0-9]{2}$")),
    (IdentifierScheme.ORCID, re.compile(r"^(?:https?://orcid\.org/)?\d{4}-\d{4}-\d{4}-\d{3}[\dX]$")),
    (IdentifierScheme.ISNI, re.compile(r"^(?:https?://isni\.org/isni/)?\d{4} ?\d{4} ?\d{4} ?\d{3}[\dX]$")),
    (IdentifierScheme.GRID, re.compile(r"^grid\.\d+\.[0-9a-f]+$", re.IGNORECASE)),
    (
        IdentifierScheme.WIKIDATA,
        re.compile(r"^(?:https?://(?:www\.)?wikidata\.org/(?:wiki|entity)/)?Q\d+$"),
    ),
    (IdentifierScheme.DOI, re.compile(r"^(?:https?://(?:dx\.)?doi\.org/|doi:)?10\.\d{4,9}/\S+$", re.IGNORECASE)),
]

KNOWN_SCHEMES = {scheme.value for scheme in IdentifierScheme if scheme is not IdentifierScheme.OTHER}


def infer_scheme(value: str) -> IdentifierScheme:
    """Guess the scheme of a bare identifier string; OTHER when nothing matches."""
    for scheme, pattern in SCHEME_PATTERNS:
        if pattern.match(value):
            return scheme
    return IdentifierScheme.OTHER


def resolve_scheme(raw_scheme: Any, value: str, custom_schemes: Sequence[str], warnings: list[str]) -> str:
    """Normalize an explicit scheme name, inferring it from the value when absent."""
    if raw_scheme in (None, ""):
        scheme = infer_scheme(value)
        if scheme is IdentifierScheme.OTHER:
            warnings.append(f"Could not infer identifier scheme for {value!r}; tagged 'other'")
        return scheme.value
    name = str(raw_scheme).strip().lower()
    if name in KNOWN_SCHEMES or name in custom_schemes:
        return name
    warnings.append(f"Unrecognized identifier scheme {raw_scheme!r} for {value!r}; tagged 'other'")
    return IdentifierScheme.OTHER.value


def _as_values(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(item).strip() for item in raw if item not in (None, "")]
    return [str(raw).strip()] if str(raw).strip() else []


TRUE_FLAGS = frozenset({"true", "yes", "1"})
FALSE_FLAGS = frozenset({"false", "no", "0", ""})


def parse_preferred(raw: Any, warnings: list[str]) -> bool:
    """Read a `preferred` flag; only booleans and true/false strings count."""
    if raw is None or isinstance(raw, bool):
        return bool(raw)
    if isinstance(raw, str):
        flag = raw.strip().lower()
        if flag in TRUE_FLAGS:
            return True
        if flag in FALSE_FLAGS:
            return False
    warnings.append(f"Unreadable preferred flag {raw!r}; treated as not preferred")
    return False


def _is_ror_v1_map(raw: Mapping) -> bool:
    return bool(raw) and all(isinstance(v, Mapping) and "all" in v for v in raw.values())


def _decode(
    raw: Any, custom_schemes: Sequence[str], warnings: list[str]
) -> Iterable[tuple[str, str, bool]]:
    """Yield (scheme, value, preferred) triples for one raw identifier value."""
    if raw is None:
        return
    if isinstance(raw, str):
        value = raw.strip()
        if value:
            yield resolve_scheme(None, value, custom_schemes, warnings), value, False
        return
    if isinstance(raw, (list, tuple)):
        for item in raw:
            yield from _decode(item, custom_schemes, warnings)
        return
    if isinstance(raw, Mapping):
        if "scheme" in raw:
            preferred = parse_preferred(raw.get("preferred"), warnings)
            for value in _as_values(raw.get("value", raw.get("identifier"))):
                scheme = resolve_scheme(raw.get("scheme"), value, custom_schemes, warnings)
                yield scheme, value, preferred
            return
        if "type" in raw and "all" in raw:
            preferred = raw.get("preferred")
            for value in _as_values(raw.get("all")):
                scheme = resolve_scheme(raw.get("type"), value, custom_schemes, warnings)
                yield scheme, value, preferred is not None and str(preferred).strip() == value
            return
        if "type" in raw and "id" in raw:
            for value in _as_values(raw.get("id")):
                yield resolve_scheme(raw.get("type"), value, custom_schemes, warnings), value, False
            return
        if _is_ror_v1_map(raw):
            for raw_scheme, entry in raw.items():
                preferred = entry.get("preferred")
                for value in _as_values(entry.get("all")):
                    scheme = resolve_scheme(raw_scheme, value, custom_schemes, warnings)
                    yield scheme, value, preferred is not None and str(preferred).strip() == value
            return
    captured = str(raw).strip()
    warnings.append(f"Unreadable identifier shape {type(raw).__name__}; captured as {captured!r}")
    if captured:
        yield IdentifierScheme.OTHER.value, captured, False


def normalize_identifiers(
    raw: Any, custom_schemes: Sequence[str] = ()
) -> tuple[list[ExternalIdentifier], list[str]]:
    """
    Decode raw identifier data into ExternalIdentifiers. Never raises.

    Duplicate (scheme, value) pairs are merged. If more than one identifier of a
    scheme claims to be preferred, only the first keeps the flag.
    """
    warnings: list[str] = []
    custom = tuple(s.lower() for s in custom_schemes)
    collected: dict[tuple[str, str], bool] = {}
    for scheme, value, preferred in _decode(raw, custom, warnings):
        key = (scheme, value)
        collected[key] = collected.get(key, False) or preferred

    identifiers: list[ExternalIdentifier] = []
    preferred_schemes: set[str] = set()
    for (scheme, value), preferred in collected.items():
        if preferred and scheme in preferred_schemes:
            warnings.append(f"Multiple preferred {scheme} identifiers; demoted {value!r}")
            preferred = False
        if preferred:
            preferred_schemes.add(scheme)
        identifiers.append(ExternalIdentifier(scheme=scheme, value=value, preferred=preferred))
    return identifiers, warnings


def select_canonical(
    identifiers: Sequence[ExternalIdentifier],
    preference: Sequence[str],
    tie_break: str = "first",
) -> ExternalIdentifier:
    """
    Pick the identifier that becomes a record's canonical id.

    Schemes in `preference` are tried in order: the preferred-flagged identifier
    of the first present scheme wins, else the first (or last) one of that
    scheme. Without any preference match, the first preferred-flagged identifier
    wins, then the first identifier overall.

    Raises:
        MissingIdentifierError: If there are no identifiers at all.
    """
    for scheme in preference:
        candidates = [identifier for identifier in identifiers if identifier.scheme == scheme]
        if not candidates:
            continue
        for candidate in candidates:
            if candidate.preferred:
                return candidate
        return candidates[-1] if tie_break == "last" else candidates[0]
    for identifier in identifiers:
        if identifier.preferred:
            return identifier
    if identifiers:
        return identifiers[0]
    raise MissingIdentifierError("No identifier to derive a canonical id from", field="id")


__all__ = ["normalize_identifiers", "select_canonical", "infer_scheme", "resolve_scheme", "parse_preferred", "KNOWN_SCHEMES"]
