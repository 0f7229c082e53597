"""Tests for ``LegacyRecordMapper``."""

import logging
from datetime import date

from student_registry.domain.models import Student
from student_registry.infrastructure.repositories.legacy.record_mapper import LegacyRecordMapper


def detail_row(**overrides):
    row = {
        "dpd_cod_dependente": 4711,
        "dpd_nome_dependente": "ANA SILVA",
        "dpd_sexo_dependente": "F",
        "dpd_filiacao_mae": "MARIA SILVA",
        "dpd_filiacao_pai": None,
        "dpd_data_nasc": "15/03/2010",
        "dpd_num_telefone_dependente": "3199999999",
        "dpd_email_dependente": "ana@example.org",
        "dpd_num_cpf": "12345678901",
        "dpd_num_identid": "MG-12.345'678",
        "dpd_data_exp_identid": "01/02/2018",
        "dpd_orgao_exp": "ssp/mg",
        "dpd_certidao_num": "c123",
        "dpd_certidao_folha": "f12",
        "dpd_certidao_livro": "l3",
        "dpd_matricula_nascimento": "m999",
        "dpd_end_nome_logradouro": "RUA A",
        "dpd_end_complemento": None,
        "dpd_end_numero": "10",
        "dpd_end_bairro": "CENTRO",
        "dpd_end_cep": "30000000",
        "mun_desc_municipio": "BELO HORIZONTE",
    }
    row.update(overrides)
    return row


class TestStudentDetail:
    def test_maps_all_sections(self):
        student = LegacyRecordMapper.map_student_detail(detail_row())

        assert student.setps_code == "4711"
        assert student.birth_date == "15/03/2010"
        assert student.address.city == "BELO HORIZONTE"
        assert student.address.street == "RUA A"

        identity = student.document.identity
        assert identity.rg == "MG-12.345678"
        assert identity.issuing_authority == "SSP/MG"
        assert identity.issue_date == date(2018, 2, 1)

    def test_full_certificate_when_complete(self):
        certificate = LegacyRecordMapper.map_document(detail_row()).certificate

        assert (certificate.number, certificate.book, certificate.sheet) == ("C123", "L3", "F12")
        assert certificate.birth_registration == "M999"

    def test_only_birth_registration_when_incomplete(self):
        certificate = LegacyRecordMapper.map_document(detail_row(dpd_certidao_livro=None)).certificate

        assert certificate.number is None
        assert certificate.sheet is None
        assert certificate.birth_registration == "M999"

    def test_unparseable_issue_date_is_none(self, caplog):
        with caplog.at_level(logging.DEBUG):
            document = LegacyRecordMapper.map_document(detail_row(dpd_data_exp_identid="31/02/2018"))

        assert document.identity.issue_date is None
        assert "unparseable legacy date" in caplog.text
        assert "31/02/2018" not in caplog.text

    def test_apply_enrollment_keeps_first_enrollment(self):
        student = Student()
        LegacyRecordMapper.apply_enrollment(student, {
            "des_serie_periodo": "5", "des_grau_estudante": "FUNDAMENTAL",
            "des_turno": "M", "des_matricula_estudante": "E1"
        })
        LegacyRecordMapper.apply_enrollment(student, {
            "des_serie_periodo": "6", "des_grau_estudante": "FUNDAMENTAL",
            "des_turno": "T", "des_matricula_estudante": "E2"
        })

        assert student.enrollment == "E1"
        assert (student.series, student.shift) == ("6", "T")


class TestProjections:
    def test_search_result_normalizes_documents(self):
        result = LegacyRecordMapper.map_search_result(detail_row(dpd_num_cpf="123'45678901"))

        assert result.cpf == "12345678901"
        assert result.rg == "MG-12.345678"
        assert result.mother_name == "MARIA SILVA"

    def test_search_result_without_optional_columns(self):
        result = LegacyRecordMapper.map_search_result({"dpd_cod_dependente": "1", "dpd_nome_dependente": "X"})

        assert result.cpf is None
        assert result.birth_date is None

    def test_eligible_record(self):
        record = LegacyRecordMapper.map_eligible({
            "cod_dependente": 10, "mt_aluno": "M1", "nome_dependente": "JOAO", "data_nascimento": "01/01/2012"
        })

        assert record.setps_code == "10"
        assert record.enrollment == "M1"

    def test_rg_info_code_is_integer(self):
        info = LegacyRecordMapper.map_rg_info({
            "cod_dependente": "42", "mt_aluno": None, "nome_dependente": "JOAO", "data_nascimento": "01/01/2012"
        })

        assert info.setps_code == 42
        assert info.enrollment is None
