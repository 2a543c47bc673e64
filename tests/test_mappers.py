"""Tests for the per-vocabulary record mappers."""

from decimal import Decimal

import pytest

from vocab.errors import (
    MissingFunderError,
    MissingIdentifierError,
    MissingLabelError,
    UnknownRelationTypeError,
)
from vocab.mappers.affiliations_mapper import map_affiliation
from vocab.mappers.awards_mapper import map_award, parse_amount
from vocab.mappers.funding_mapper import map_funder
from vocab.mappers.names_mapper import display_name, map_name
from vocab.mappers.subjects_mapper import map_subject
from vocab.models import MappingConfig, RelationType

CONFIG = MappingConfig()

ROR_V1_RECORD = {
    "id": "https://ror.org/00aaa1234",
    "name": "Test University",
    "labels": [
        {"iso639": "fr", "label": "Université de Test"},
        {"iso639": "de", "label": "Test Universität"},
    ],
    "acronyms": ["TU", "TEST"],
}

ROR_V2_RECORD = {
    "id": "https://ror.org/05gq02987",
    "names": [
        {"value": "ExU", "types": ["acronym"], "lang": None},
        {"value": "Université Exemple", "types": ["label"], "lang": "fr"},
        {"value": "Example University", "types": ["ror_display", "label"], "lang": "en"},
    ],
    "status": "inactive",
    "relationships": [{"type": "parent", "id": "https://ror.org/0bbbbbb22", "label": "Parent Org"}],
    "external_ids": [{"type": "isni", "all": ["0000 0001 2146 438X"], "preferred": None}],
}


class TestAffiliationMapper:
    """Test map_affiliation."""

    def test_minimal_record(self):
        record = {
            "id": {"scheme": "ROR", "value": "https://ror.org/05gq02987", "preferred": True},
            "names": [{"lang": "en", "value": "Example University"}],
            "status": "active",
        }
        entry, warnings = map_affiliation(record, CONFIG)
        assert entry.to_yaml_dict() == {
            "id": "https://ror.org/05gq02987",
            "name": "Example University",
            "labels": {"en": "Example University"},
            "active": True,
            "identifiers": [{"scheme": "ror", "identifier": "https://ror.org/05gq02987"}],
            "relationships": [],
        }
        assert warnings == []

    def test_ror_v1_record(self):
        entry, _ = map_affiliation(ROR_V1_RECORD, CONFIG)
        assert entry.id == "https://ror.org/00aaa1234"
        assert entry.name == "Test University"
        assert entry.labels == {
            "en": "Test University",
            "fr": "Université de Test",
            "de": "Test Universität",
        }
        assert entry.acronym == "TU"

    def test_strip_id_prefix_and_transliterate(self):
        config = MappingConfig(strip_id_prefix=True, transliterate=True)
        entry, _ = map_affiliation(ROR_V1_RECORD, config)
        assert entry.id == "00aaa1234"
        assert entry.labels["fr"] == "Universite de Test"
        assert entry.labels["de"] == "Test Universitat"
        # identifiers keep their full value
        assert entry.identifiers[0].value == "https://ror.org/00aaa1234"

    def test_ror_v2_record(self):
        entry, warnings = map_affiliation(ROR_V2_RECORD, CONFIG)
        assert entry.name == "Example University"
        assert entry.labels == {"en": "Example University", "fr": "Université Exemple"}
        assert entry.acronym == "ExU"
        assert entry.active is False
        assert [(i.scheme, i.value) for i in entry.identifiers] == [
            ("ror", "https://ror.org/05gq02987"),
            ("isni", "0000 0001 2146 438X"),
        ]
        assert [(r.type, r.target_id) for r in entry.relationships] == [
            (RelationType.PARENT, "https://ror.org/0bbbbbb22")
        ]
        assert warnings == []

    def test_boolean_active_wins_over_status(self):
        record = {**ROR_V1_RECORD, "active": False, "status": "active"}
        entry, _ = map_affiliation(record, CONFIG)
        assert entry.active is False

    def test_missing_identifier(self):
        with pytest.raises(MissingIdentifierError):
            map_affiliation({"name": "Nameless Org"}, CONFIG)

    def test_missing_label_carries_record_id(self):
        with pytest.raises(MissingLabelError) as exc_info:
            map_affiliation({"id": "https://ror.org/05gq02987"}, CONFIG)
        assert exc_info.value.record_id == "https://ror.org/05gq02987"

    def test_fallback_label(self):
        entry, warnings = map_affiliation(
            {"id": "https://ror.org/05gq02987"}, MappingConfig(fallback_label="Unnamed")
        )
        assert entry.name == "Unnamed"
        assert len(warnings) == 1

    def test_unknown_relationship_type(self):
        record = {**ROR_V1_RECORD, "relationships": [{"type": "sibling", "id": "https://ror.org/0bbbbbb22"}]}
        with pytest.raises(UnknownRelationTypeError) as exc_info:
            map_affiliation(record, CONFIG)
        assert exc_info.value.record_id == "https://ror.org/00aaa1234"

    def test_source_record_is_not_modified(self):
        record = {**ROR_V2_RECORD}
        snapshot = repr(record)
        map_affiliation(record, CONFIG)
        assert repr(record) == snapshot


class TestNameMapper:
    """Test map_name."""

    PERSON = {
        "orcid": "0000-0002-1825-0097",
        "given_name": "Josiah",
        "family_name": "Carberry",
        "affiliations": [{"id": "https://ror.org/05gq02987"}, {"name": "No Id Org"}],
        "identifiers": [{"scheme": "isni", "value": "0000 0001 2146 438X"}],
    }

    def test_person(self):
        entry, warnings = map_name(self.PERSON, CONFIG)
        assert entry.id == "0000-0002-1825-0097"
        assert entry.name == "Carberry, Josiah"
        assert entry.labels == {"en": "Carberry, Josiah"}
        assert entry.given_name == "Josiah"
        assert entry.family_name == "Carberry"
        assert entry.type == "personal"
        assert [(r.type, r.target_id) for r in entry.relationships] == [
            (RelationType.RELATED, "https://ror.org/05gq02987")
        ]
        assert len(warnings) == 1
        assert "affiliation" in warnings[0]

    def test_isni_when_no_orcid(self):
        record = {key: value for key, value in self.PERSON.items() if key != "orcid"}
        entry, _ = map_name(record, CONFIG)
        assert entry.id == "0000 0001 2146 438X"

    def test_organizational_full_name(self):
        entry, _ = map_name(
            {
                "id": {"scheme": "orcid", "value": "0000-0001-2345-6789"},
                "name": "Example Consortium",
                "type": "Organizational",
            },
            CONFIG,
        )
        assert entry.name == "Example Consortium"
        assert entry.type == "organizational"
        assert entry.to_yaml_dict()["type"] == "organizational"

    def test_unknown_type_falls_back_to_personal(self):
        entry, warnings = map_name({**self.PERSON, "type": "robot"}, CONFIG)
        assert entry.type == "personal"
        assert any("robot" in warning for warning in warnings)

    def test_missing_identifier(self):
        with pytest.raises(MissingIdentifierError):
            map_name({"given_name": "Ada", "family_name": "Lovelace"}, CONFIG)

    def test_display_name(self):
        assert display_name("Ada", "Lovelace") == "Lovelace, Ada"
        assert display_name(None, "Lovelace") == "Lovelace"
        assert display_name(None, None) is None


class TestFunderMapper:
    """Test map_funder."""

    ROR_FUNDER = {
        "id": "https://ror.org/00k4n6c32",
        "names": [
            {"value": "European Commission", "types": ["ror_display", "label"], "lang": "en"},
            {"value": "EC", "types": ["acronym"], "lang": None},
        ],
        "types": ["government"],
        "locations": [{"geonames_details": {"country_code": "be"}}],
        "external_ids": [{"type": "fundref", "all": ["501100000780"], "preferred": "501100000780"}],
        "status": "active",
    }

    def test_ror_funder(self):
        entry, warnings = map_funder(self.ROR_FUNDER, CONFIG)
        assert entry.id == "https://ror.org/00k4n6c32"
        assert entry.name == "European Commission"
        assert entry.country == "BE"
        assert entry.funder_type == "government"
        assert entry.acronym == "EC"
        assert entry.identifiers[1].scheme == "other"
        assert len(warnings) == 1

    def test_custom_scheme(self):
        entry, warnings = map_funder(self.ROR_FUNDER, MappingConfig(custom_schemes=("fundref",)))
        assert entry.identifiers[1].scheme == "fundref"
        assert entry.identifiers[1].preferred is True
        assert warnings == []

    def test_doi_funder(self):
        entry, _ = map_funder(
            {
                "identifiers": ["10.13039/501100000780"],
                "name": "European Commission",
                "country": "be",
                "funder_type": "Government",
            },
            CONFIG,
        )
        assert entry.id == "10.13039/501100000780"
        assert entry.country == "BE"
        assert entry.funder_type == "government"

    def test_ror_v1_country_object(self):
        record = {
            "id": "https://ror.org/00k4n6c32",
            "name": "European Commission",
            "country": {"country_code": "BE", "country_name": "Belgium"},
        }
        entry, _ = map_funder(record, CONFIG)
        assert entry.country == "BE"


class TestAwardMapper:
    """Test map_award."""

    AWARD = {
        "identifiers": [{"scheme": "doi", "value": "10.3030/101000001"}],
        "number": "101000001",
        "title": {"en": "Big Project", "fr": "Grand Projet"},
        "funder": {"id": "https://ror.org/00k4n6c32"},
        "amount": "1,500,000.00",
        "acronym": "BIG",
    }

    def test_full_award(self):
        entry, warnings = map_award(self.AWARD, CONFIG)
        assert entry.id == "10.3030/101000001"
        assert entry.name == "Big Project"
        assert entry.labels == {"en": "Big Project", "fr": "Grand Projet"}
        assert entry.number == "101000001"
        assert entry.acronym == "BIG"
        assert entry.funder.id == "https://ror.org/00k4n6c32"
        assert entry.amount == Decimal("1500000.00")
        assert entry.currency == "EUR"
        data = entry.to_yaml_dict()
        assert data["funder"] == {"id": "https://ror.org/00k4n6c32"}
        assert data["amount"] == "1500000.00"
        assert warnings == []

    def test_composite_id(self):
        record = {"number": "12345", "funder": "https://ror.org/00k4n6c32", "title": "Grant"}
        entry, _ = map_award(record, CONFIG)
        assert entry.id == "https://ror.org/00k4n6c32::12345"
        assert entry.currency is None

        stripped, _ = map_award(record, MappingConfig(strip_id_prefix=True))
        assert stripped.id == "00k4n6c32::12345"
        assert stripped.funder.id == "00k4n6c32"

    def test_missing_funder(self):
        record = {"identifiers": ["10.3030/101000002"], "number": "2", "title": "X"}
        with pytest.raises(MissingFunderError) as exc_info:
            map_award(record, CONFIG)
        assert exc_info.value.record_id == "10.3030/101000002"

    def test_number_without_funder(self):
        with pytest.raises(MissingFunderError) as exc_info:
            map_award({"number": "123", "title": "Grant without funder"}, CONFIG)
        assert exc_info.value.record_id == "123"
        assert exc_info.value.field == "funder"

    def test_missing_identifier(self):
        with pytest.raises(MissingIdentifierError):
            map_award({"title": "Neither number nor identifier"}, CONFIG)

    def test_non_finite_amount_is_dropped(self):
        entry, warnings = map_award({**self.AWARD, "amount": float("nan")}, CONFIG)
        assert entry.amount is None
        assert entry.currency is None
        assert len(warnings) == 1

    def test_label_falls_back_to_number(self):
        entry, warnings = map_award({"number": "12345", "funder_id": "https://ror.org/00k4n6c32"}, CONFIG)
        assert entry.labels == {"en": "12345"}
        assert len(warnings) == 1

    def test_currency_is_uppercased(self):
        entry, _ = map_award({**self.AWARD, "currency": "usd"}, CONFIG)
        assert entry.currency == "USD"


@pytest.mark.parametrize(
    "raw, expected, warned",
    [
        (None, None, False),
        (1000, Decimal(1000), False),
        (1.5, Decimal("1.5"), False),
        ("12,500", Decimal("12500"), False),
        ("12,5", Decimal("12.5"), False),
        ("EUR 2500.50", Decimal("2500.50"), False),
        ("n/a", None, True),
        (True, None, True),
        (float("nan"), None, True),
        (float("inf"), None, True),
        (Decimal("-Infinity"), None, True),
    ],
)
def test_parse_amount(raw, expected, warned: bool) -> None:
    amount, warnings = parse_amount(raw)
    assert amount == expected
    assert bool(warnings) is warned


class TestSubjectMapper:
    """Test map_subject."""

    SUBJECT = {
        "scheme": "FOS",
        "notation": "1.3",
        "subject": "Physical sciences",
        "labels": {"de": "Naturwissenschaften"},
        "broader": ["FOS:1"],
        "narrower": [{"id": "FOS:1.3.1"}],
        "uri": "https://www.wikidata.org/wiki/Q413",
    }

    def test_subject(self):
        entry, warnings = map_subject(self.SUBJECT, CONFIG)
        assert entry.id == "FOS:1.3"
        assert entry.name == "Physical sciences"
        assert entry.labels == {"en": "Physical sciences", "de": "Naturwissenschaften"}
        assert entry.scheme == "FOS"
        assert entry.notation == "1.3"
        assert [(i.scheme, i.value) for i in entry.identifiers] == [
            ("wikidata", "https://www.wikidata.org/wiki/Q413")
        ]
        assert [(r.type, r.target_id) for r in entry.relationships] == [
            (RelationType.PARENT, "FOS:1"),
            (RelationType.CHILD, "FOS:1.3.1"),
        ]
        assert warnings == []

    def test_id_template(self):
        entry, _ = map_subject(self.SUBJECT, MappingConfig(subject_id_template="{notation}"))
        assert entry.id == "1.3"

    def test_missing_notation(self):
        with pytest.raises(MissingIdentifierError) as exc_info:
            map_subject({"scheme": "FOS", "subject": "Physical sciences"}, CONFIG)
        assert exc_info.value.field == "notation"
