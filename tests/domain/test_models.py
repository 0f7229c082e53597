"""Tests for domain models and legacy string normalization."""

import logging

import pytest

from student_registry.domain.models import BirthCertificate, DatabaseKind, Identity
from student_registry.domain.normalization import normalize, normalize_upper, trim_or_none


class TestNormalize:
    def test_accented_uppercase_letters(self):
        assert normalize("ÇÁÉÍÓÚ") == "CAEIOU"

    def test_full_accent_table(self):
        assert normalize("ÇÁÀÃÂÄÉÈÊËÍÌÎÏÓÒÕÖÔÚÙÛÜ") == "CAAAAAEEEEIIIIOOOOOUUUU"

    def test_apostrophes_removed(self):
        assert normalize("DON'T") == "DONT"

    def test_none_and_empty(self):
        assert normalize(None) is None
        assert normalize("") == ""

    def test_lowercase_accents_untouched(self):
        assert normalize("ção") == "ção"

    def test_normalize_upper(self):
        assert normalize_upper("ssp/sé") == "SSP/SÉ"
        assert normalize_upper("SSP/SÉ") == "SSP/SE"
        assert normalize_upper(None) is None

    def test_trim_or_none(self):
        assert trim_or_none("  x ") == "x"
        assert trim_or_none(None) is None


class TestDatabaseKind:
    @pytest.mark.parametrize("selector,expected", [
        ("oracle", DatabaseKind.ORACLE),
        (" ORACLE ", DatabaseKind.ORACLE),
        ("SqlServer", DatabaseKind.SQLSERVER),
        ("default", DatabaseKind.DEFAULT),
        ("", DatabaseKind.DEFAULT),
        (None, DatabaseKind.DEFAULT),
        (DatabaseKind.SQLSERVER, DatabaseKind.SQLSERVER),
    ])
    def test_from_selector(self, selector, expected):
        assert DatabaseKind.from_selector(selector) is expected

    def test_unknown_vendor_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert DatabaseKind.from_selector("unknown-vendor") is DatabaseKind.DEFAULT
        assert "unknown-vendor" in caplog.text


class TestDocumentFields:
    def test_identity_normalized_on_write(self):
        identity = Identity(cpf="123'45", rg="MG-1.234'", issuing_authority="ssp/mg")
        assert identity.cpf == "12345"
        assert identity.rg == "MG-1.234"
        assert identity.issuing_authority == "SSP/MG"

        identity.issuing_authority = "DETRÃN"
        assert identity.issuing_authority == "DETRAN"

    def test_certificate_upper_cased(self):
        certificate = BirthCertificate(number="abc1", book="b2", sheet="f3", birth_registration="xyz")
        assert certificate.number == "ABC1"
        assert certificate.birth_registration == "XYZ"
        assert certificate.is_complete()

    def test_certificate_incomplete(self):
        assert not BirthCertificate(number="1", book="2").is_complete()
