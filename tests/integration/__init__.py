"""
Integration tests package.

Tests de integración que verifican:
- Repositorios SQL sobre SQLite en memoria (claves foráneas, atomicidad, cascada)
- Retry ante deadlocks
- Health checks

Para ejecutar solo tests de integración:
    pytest tests/integration/
"""
