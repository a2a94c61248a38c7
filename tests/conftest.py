import pytest

from sst.sst_symbols import Scope, SymbolTable


@pytest.fixture
def discarded() -> list[Scope]:
    """Scopes in the order the symbol table discarded them."""
    return []


@pytest.fixture
def recording_table(discarded: list[Scope]) -> SymbolTable:
    return SymbolTable(on_exit=discarded.append)
