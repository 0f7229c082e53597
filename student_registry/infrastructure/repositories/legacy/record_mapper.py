# student_registry/infrastructure/repositories/legacy/record_mapper.py
"""
Maps legacy dependents-schema rows into domain records.

Birth dates arrive already rendered as dd/mm/yyyy strings and are kept as strings.
"""

import logging
from datetime import datetime, date
from typing import Any, Dict, Optional

from ....domain.models import (
    Address, BirthCertificate, Document, EligibleStudentRecord, Identity, LEGACY_DATE_FORMAT,
    Student, StudentRgInfo, StudentSearchResult
)
from ....domain.normalization import normalize

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _text(row: Row, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _parse_legacy_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, LEGACY_DATE_FORMAT).date()
    except ValueError:
        logger.debug("Ignoring unparseable legacy date")
        return None


class LegacyRecordMapper:
    """Row-to-record mapping; every method is a pure function of the row."""

    @staticmethod
    def map_search_result(row: Row) -> StudentSearchResult:
        return StudentSearchResult(
            setps_code=_text(row, 'dpd_cod_dependente'),
            name=_text(row, 'dpd_nome_dependente'),
            birth_date=_text(row, 'dpd_data_nasc'),
            mother_name=_text(row, 'dpd_filiacao_mae'),
            cpf=normalize(_text(row, 'dpd_num_cpf')),
            rg=normalize(_text(row, 'dpd_num_identid')),
            phone=_text(row, 'dpd_num_telefone_dependente'),
            email=_text(row, 'dpd_email_dependente')
        )

    @staticmethod
    def map_eligible(row: Row) -> EligibleStudentRecord:
        return EligibleStudentRecord(
            setps_code=_text(row, 'cod_dependente'),
            enrollment=_text(row, 'mt_aluno'),
            name=_text(row, 'nome_dependente'),
            birth_date=_text(row, 'data_nascimento')
        )

    @staticmethod
    def map_rg_info(row: Row) -> StudentRgInfo:
        code = row.get('cod_dependente')
        return StudentRgInfo(
            setps_code=int(code) if code is not None else 0,
            enrollment=_text(row, 'mt_aluno'),
            name=_text(row, 'nome_dependente'),
            birth_date=_text(row, 'data_nascimento')
        )

    @staticmethod
    def map_document(row: Row) -> Document:
        """Identity plus certificate; the full certificate only when number, book and sheet are filled."""
        identity = Identity(
            cpf=_text(row, 'dpd_num_cpf'),
            rg=_text(row, 'dpd_num_identid'),
            issue_date=_parse_legacy_date(_text(row, 'dpd_data_exp_identid')),
            issuing_authority=_text(row, 'dpd_orgao_exp')
        )

        certificate = BirthCertificate(
            number=_text(row, 'dpd_certidao_num'),
            book=_text(row, 'dpd_certidao_livro'),
            sheet=_text(row, 'dpd_certidao_folha'),
            birth_registration=_text(row, 'dpd_matricula_nascimento')
        )
        if not certificate.is_complete():
            certificate = BirthCertificate(birth_registration=certificate.birth_registration)

        return Document(identity=identity, certificate=certificate)

    @staticmethod
    def map_address(row: Row) -> Address:
        return Address(
            street=_text(row, 'dpd_end_nome_logradouro'),
            number=_text(row, 'dpd_end_numero'),
            complement=_text(row, 'dpd_end_complemento'),
            district=_text(row, 'dpd_end_bairro'),
            zip_code=_text(row, 'dpd_end_cep'),
            city=_text(row, 'mun_desc_municipio')
        )

    @classmethod
    def map_student_detail(cls, row: Row) -> Student:
        return Student(
            setps_code=_text(row, 'dpd_cod_dependente'),
            name=_text(row, 'dpd_nome_dependente'),
            sex=_text(row, 'dpd_sexo_dependente'),
            mother_name=_text(row, 'dpd_filiacao_mae'),
            father_name=_text(row, 'dpd_filiacao_pai'),
            birth_date=_text(row, 'dpd_data_nasc'),
            phone=_text(row, 'dpd_num_telefone_dependente'),
            email=_text(row, 'dpd_email_dependente'),
            address=cls.map_address(row),
            document=cls.map_document(row)
        )

    @staticmethod
    def apply_enrollment(student: Student, row: Row) -> None:
        """Series, grade and shift from the latest row; the first enrollment number is kept."""
        student.series = _text(row, 'des_serie_periodo')
        student.grade = _text(row, 'des_grau_estudante')
        student.shift = _text(row, 'des_turno')
        if student.enrollment is None:
            student.enrollment = _text(row, 'des_matricula_estudante')
