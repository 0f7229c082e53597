# student_registry/infrastructure/repositories/legacy/student_repository.py
"""
Student repository for the legacy dependents schema.

Methods raise DataAccessError subclasses; the student service turns them into
the sentinel values legacy callers expect.
"""

import logging
from datetime import date, datetime
from typing import Any, List, Optional, Sequence, Union

from ....domain.interfaces import StudentLegacyDao
from ....domain.models import (
    DatabaseKind, EligibleStudentRecord, LEGACY_DATE_FORMAT, Student, StudentRgInfo, StudentSearchResult
)
from ....domain.normalization import trim_or_none
from ...database.handles import SqlNull
from ...queries.query_builder import DynamicQueryBuilder
from ..base_repository import BaseLegacyRepository, DaoFactory
from .record_mapper import LegacyRecordMapper

logger = logging.getLogger(__name__)

DEFAULT_TEST_SCHOOL_CODE = "2603"
DEFAULT_TEST_NAME_MARKER = "TESTE"
EXCLUDED_FLAG = "E"

DEPENDENT_DETAIL_QUERY = (
    "select dpd.dpd_cod_dependente, dpd.dpd_nome_dependente, dpd.dpd_sexo_dependente, "
    "dpd.dpd_filiacao_mae, dpd.dpd_filiacao_pai, "
    "TO_CHAR(dpd.dpd_data_nasc,'dd/mm/yyyy') dpd_data_nasc, dpd.dpd_num_telefone_dependente, "
    "dpd.dpd_email_dependente, dpd.dpd_num_cpf, dpd.dpd_num_identid, "
    "TO_CHAR(dpd.dpd_data_exp_identid,'dd/mm/yyyy') dpd_data_exp_identid, dpd.dpd_orgao_exp, "
    "dpd.dpd_certidao_num, dpd.dpd_certidao_folha, dpd.dpd_certidao_livro, dpd.dpd_matricula_nascimento, "
    "dpd.dpd_end_nome_logradouro, dpd.dpd_end_complemento, dpd.dpd_end_numero, dpd.dpd_end_bairro, "
    "dpd.dpd_end_cep, mun.mun_desc_municipio "
    "from admcit.tpu_dependentes_dpd dpd, admcit.tpu_municipios_mun mun "
    "where dpd.mun_cod_municipio = mun.mun_cod_municipio(+)"
)

DEPENDENT_ENROLLMENT_QUERY = (
    "select des.des_serie_periodo, des.des_grau_estudante, des.des_turno, des.des_matricula_estudante "
    "from admcit.tpu_dependentes_dpd dpd "
    "join admcit.tpu_dependentes_tit_dpt dpt on dpd.dpd_cod_dependente = dpt.dpd_cod_dependente "
    "join admcit.tpu_depend_estudante_des des on dpt.dpt_cod_dpd_tit = des.dpt_cod_dpd_tit "
    "where 1=1"
)

NAME_SEARCH_QUERY = (
    "select dpd.dpd_cod_dependente, dpd.dpd_nome_dependente, "
    "TO_CHAR(dpd.dpd_data_nasc,'dd/mm/yyyy') dpd_data_nasc, dpd.dpd_num_cpf, dpd.dpd_filiacao_mae, "
    "dpd.dpd_num_telefone_dependente, dpd.dpd_email_dependente "
    "from admcit.tpu_dependentes_dpd dpd "
    "where 1=1"
)

GENERAL_SEARCH_QUERY = (
    "select dpd.dpd_cod_dependente, dpd.dpd_nome_dependente, "
    "TO_CHAR(dpd.dpd_data_nasc,'dd/mm/yyyy') dpd_data_nasc, dpd.dpd_num_cpf, dpd.dpd_num_identid, "
    "dpd.dpd_filiacao_mae "
    "from admcit.tpu_dependentes_dpd dpd "
    "where 1=1"
)

RG_LOOKUP_QUERY = (
    "select dpd.dpd_cod_dependente cod_dependente, des.des_matricula_estudante mt_aluno, "
    "dpd.dpd_nome_dependente nome_dependente, TO_CHAR(dpd.dpd_data_nasc,'dd/mm/yyyy') data_nascimento "
    "from admcit.tpu_dependentes_dpd dpd "
    "left join admcit.tpu_dependentes_tit_dpt dpt on dpd.dpd_cod_dependente = dpt.dpd_cod_dependente "
    "left join admcit.tpu_depend_estudante_des des on dpt.dpt_cod_dpd_tit = des.dpt_cod_dpd_tit "
    "where 1=1"
)

ELIGIBLE_QUERY = (
    "select alu.cod_dependente, alu.mt_aluno, alu.nome_dependente, "
    "TO_CHAR(alu.data_nascimento,'dd/mm/yyyy') data_nascimento "
    "from alu_aluno_apto alu "
    "where alu.ativo = 'S'"
)

STUDENT_LIST_QUERY = (
    "select alu.cod_dependente, alu.mt_aluno, alu.nome_dependente, "
    "TO_CHAR(alu.data_nascimento,'dd/mm/yyyy') data_nascimento "
    "from alu_lista_alunos alu "
    "where 1=1"
)

INSERT_STUDENT_SQL = (
    "INSERT INTO alu_lista_alunos ("
    "cod_dependente, nome_dependente, mt_aluno, nome_mae, nome_pai, data_nascimento, email, "
    "ip_solicitante, funcao_origem_site"
    ") VALUES (?, ?, ?, ?, ?, TO_DATE(?, 'DD/MM/YYYY'), ?, ?, ?)"
)

EXCLUDE_STUDENT_SQL = (
    "UPDATE alu_lista_alunos SET funcao_origem_site = ? "
    "WHERE cod_dependente = ? AND cod_titular = ? AND ano_vigencia = ?"
)


def birth_date_parameter(value: Union[date, str, None]) -> Any:
    """dd/mm/yyyy string for TO_DATE, or a DATE-typed NULL when absent or unparseable."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime(LEGACY_DATE_FORMAT)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            datetime.strptime(text, LEGACY_DATE_FORMAT)
            return text
        except ValueError:
            logger.warning("Could not bind birth date for insert; binding NULL")
    return SqlNull("DATE")


class StudentLegacyRepository(BaseLegacyRepository, StudentLegacyDao):
    """Student queries and writes against the legacy database."""

    def __init__(self, dao_factory: DaoFactory, kind: Union[str, DatabaseKind] = DatabaseKind.ORACLE,
                 test_school_code: str = DEFAULT_TEST_SCHOOL_CODE,
                 test_name_marker: str = DEFAULT_TEST_NAME_MARKER):
        super().__init__(dao_factory, kind)
        self.test_school_code = str(test_school_code)
        self.test_name_marker = test_name_marker
        self.mapper = LegacyRecordMapper()

    def _exclude_test_records(self, builder: DynamicQueryBuilder, school_code: Optional[str],
                              name_column: str = "dpd.dpd_nome_dependente") -> DynamicQueryBuilder:
        """Hide test students from every school except the test school."""
        if school_code is not None and str(school_code).strip() == self.test_school_code:
            return builder
        marker = self.test_name_marker.replace("'", "''")
        return builder.raw(f"{name_column} not like '%{marker}%'")

    @staticmethod
    def _parse_setps_code(setps_code: Union[str, int, None]) -> int:
        text = str(setps_code).strip() if setps_code is not None else ""
        if not text.isdigit():
            raise ValueError(f"Invalid SETPS code: '{setps_code}'")
        return int(text)

    def find_by_setps_code(self, setps_code: Union[str, int], school_code: Optional[str]) -> Optional[Student]:
        code = self._parse_setps_code(setps_code)

        detail_query = self._exclude_test_records(
            DynamicQueryBuilder(DEPENDENT_DETAIL_QUERY).raw("dpd.dpd_cod_dependente = ?", code),
            school_code
        ).build()
        enrollment_query = self._exclude_test_records(
            DynamicQueryBuilder(DEPENDENT_ENROLLMENT_QUERY).raw("dpd.dpd_cod_dependente = ?", code),
            school_code
        ).build()

        with self.new_dao().session(self.kind) as dao:
            row = self.fetch_first(dao, detail_query)
            if row is None:
                logger.info("No dependent found for the requested SETPS code")
                return None

            student = self.mapper.map_student_detail(row)
            student.school_code = school_code
            for enrollment_row in self.fetch_all(dao, enrollment_query):
                self.mapper.apply_enrollment(student, enrollment_row)

        return student

    def insert_student(self, student: Student, client_ip: Optional[str], operation_type: Optional[str]) -> int:
        if student is None:
            logger.warning("insert_student called without a student")
            return 0

        with self.new_dao().session(self.kind) as dao:
            statement = dao.prepare_insert(INSERT_STUDENT_SQL)
            statement.set_parameter(1, trim_or_none(student.setps_code))
            statement.set_parameter(2, trim_or_none(student.name))
            statement.set_parameter(3, trim_or_none(student.enrollment))
            statement.set_parameter(4, trim_or_none(student.mother_name))
            statement.set_parameter(5, trim_or_none(student.father_name))
            statement.set_parameter(6, birth_date_parameter(student.birth_date))
            statement.set_parameter(7, trim_or_none(student.email))
            statement.set_parameter(8, trim_or_none(client_ip))
            statement.set_parameter(9, trim_or_none(operation_type))
            updated = statement.execute_update()

        if updated > 0:
            return 1

        logger.warning("insert_student executed but no rows were inserted")
        return 0

    def search_by_name(self, name: Optional[str], birth_date: Optional[str],
                       cpf: Optional[str], mother_name: Optional[str]) -> List[StudentSearchResult]:
        query = (DynamicQueryBuilder(NAME_SEARCH_QUERY)
                 .contains("dpd.dpd_nome_dependente", name)
                 .date_equals("dpd.dpd_data_nasc", birth_date)
                 .equals("dpd.dpd_num_cpf", cpf)
                 .contains("dpd.dpd_filiacao_mae", mother_name)
                 .order_by("dpd.dpd_nome_dependente")
                 .build())

        return [self.mapper.map_search_result(row) for row in self.execute_query(query)]

    def general_search(self, rg: Optional[str], certificate_number: Optional[str],
                       birth_registration: Optional[str], cpf: Optional[str],
                       mother_name: Optional[str], name: Optional[str],
                       birth_date: Optional[str]) -> Optional[StudentSearchResult]:
        query = (DynamicQueryBuilder(GENERAL_SEARCH_QUERY)
                 .equals("dpd.dpd_num_identid", rg)
                 .equals("dpd.dpd_certidao_num", certificate_number)
                 .equals("dpd.dpd_matricula_nascimento", birth_registration)
                 .equals("dpd.dpd_num_cpf", cpf)
                 .contains("dpd.dpd_filiacao_mae", mother_name)
                 .contains("dpd.dpd_nome_dependente", name)
                 .date_equals("dpd.dpd_data_nasc", birth_date)
                 .fetch_first(1)
                 .build())

        with self.new_dao().session(self.kind) as dao:
            row = self.fetch_first(dao, query)

        return self.mapper.map_search_result(row) if row is not None else None

    def list_eligible(self, initials: Union[str, Sequence[str], None], school_code: str,
                      validity_year: str, birth_date: Optional[str]) -> List[EligibleStudentRecord]:
        query = (DynamicQueryBuilder(ELIGIBLE_QUERY)
                 .raw("alu.cod_titular = ?", school_code)
                 .raw("alu.ano_vigencia = ?", validity_year)
                 .any_starts_with("alu.nome_dependente", initials)
                 .date_equals("alu.data_nascimento", birth_date)
                 .order_by("alu.nome_dependente")
                 .build())

        return [self.mapper.map_eligible(row) for row in self.execute_query(query)]

    def _list_students(self, school_code: str, validity_year: str,
                       setps_codes: Union[str, Sequence[str], None], excluded: bool) -> List[EligibleStudentRecord]:
        builder = (DynamicQueryBuilder(STUDENT_LIST_QUERY)
                   .raw("alu.cod_titular = ?", school_code)
                   .raw("alu.ano_vigencia = ?", validity_year))
        if excluded:
            builder.raw("alu.funcao_origem_site = ?", EXCLUDED_FLAG)
        else:
            builder.raw("(alu.funcao_origem_site is null or alu.funcao_origem_site <> ?)", EXCLUDED_FLAG)
            builder.raw("alu.dt_chegada is not null")
        query = (builder
                 .in_list("alu.cod_dependente", setps_codes)
                 .order_by("alu.nome_dependente")
                 .build())

        return [self.mapper.map_eligible(row) for row in self.execute_query(query)]

    def list_sent(self, school_code: str, validity_year: str,
                  setps_codes: Union[str, Sequence[str], None] = None) -> List[EligibleStudentRecord]:
        """Students already sent in the cycle, optionally restricted to hyphen/comma-joined codes."""
        return self._list_students(school_code, validity_year, setps_codes, excluded=False)

    def list_excluded(self, school_code: str, validity_year: str,
                      setps_codes: Union[str, Sequence[str], None] = None) -> List[EligibleStudentRecord]:
        """Students flagged as excluded in the cycle."""
        return self._list_students(school_code, validity_year, setps_codes, excluded=True)

    def exclude_student(self, setps_code: Union[str, int], school_code: str, validity_year: str) -> int:
        """Flag a student as excluded; 1 when a row was updated."""
        code = str(self._parse_setps_code(setps_code))
        updated = self.execute_update(EXCLUDE_STUDENT_SQL, [EXCLUDED_FLAG, code, school_code, validity_year])
        if updated > 0:
            return 1
        logger.warning("exclude_student matched no rows")
        return 0

    def find_by_rg(self, rg: str, school_code: Optional[str]) -> List[StudentRgInfo]:
        if not rg or not rg.strip():
            return []

        query = self._exclude_test_records(
            DynamicQueryBuilder(RG_LOOKUP_QUERY).equals("dpd.dpd_num_identid", rg),
            school_code
        ).order_by("dpd.dpd_nome_dependente").build()

        return [self.mapper.map_rg_info(row) for row in self.execute_query(query)]
