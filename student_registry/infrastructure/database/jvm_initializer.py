# student_registry/infrastructure/database/jvm_initializer.py
from typing import Any, Dict, List

from .connection_manager import JvmManager


def collect_jdbc_jars(database_config: Dict[str, Any]) -> List[str]:
    """JDBC driver jars configured for the legacy vendors."""
    jars = []
    for vendor in ('oracle', 'sqlserver'):
        jar = (database_config.get(vendor) or {}).get('jdbc_jar_path')
        if jar:
            jars.append(jar)
    return jars


def initialize_jvm_once(jar_paths: List[str]) -> None:
    """Initialize JVM with all required JDBC JARs."""
    jvm = JvmManager()
    for jar in jar_paths:
        jvm.add_jar_path(jar)
    jvm.start_jvm()
