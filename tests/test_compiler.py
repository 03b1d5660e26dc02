# =============================================================================
# test_compiler.py - Compiler Driver Tests
# =============================================================================
# End-to-end tests for the compilation pipeline:
#   Source → Lex → Parse → Allocate → Generate → Resolve
# =============================================================================

from concurrent.futures import ThreadPoolExecutor

import pytest
from acc8.errors import Acc8Error, ConfigurationError
from acc8.compiler import (
    Compiler,
    CompilerOptions,
    CompilerError,
    DuplicateDeclarationError,
    UndeclaredVariableError,
    compile_file,
    compile_source,
)
from acc8.compiler.codegen import CodeGenerator
from acc8.compiler.instructions import MemoryAddress, Opcode


SUM_PROGRAM = """\
VAR a = 5;
VAR b = 10;
VAR result = 0;
result = a + b;
"""

BRANCH_PROGRAM = """\
VAR a = 7;
VAR b = 3;
VAR result = 0;
IF a > b {
    result = a - b;
} ELSE {
    result = b - a;
}
"""


class TestScenarios:

    def test_sum_program_is_eight_instructions(self):
        result = compile_source(SUM_PROGRAM)
        assert len(result.program) == 8
        assert result.assembly.splitlines()[-1] == "STORE A, 0x02"

    def test_sum_program_assembly(self):
        assert compile_source(SUM_PROGRAM).assembly == "\n".join([
            "LOAD A, #5",
            "STORE A, 0x00",
            "LOAD A, #10",
            "STORE A, 0x01",
            "LOAD A, 0x00",
            "LOAD B, 0x01",
            "ADD A, B",
            "STORE A, 0x02",
        ])

    def test_branch_program(self):
        result = compile_source(BRANCH_PROGRAM)
        opcodes = [i.opcode for i in result.instructions]
        assert opcodes.count(Opcode.CMP) == 1
        assert opcodes.count(Opcode.JNC) == 1
        assert opcodes.count(Opcode.JMP) == 1
        assert opcodes.count(Opcode.LABEL) == 2

        stores = [i for i in result.program.instructions if i.opcode == Opcode.STORE]
        assert [s.operands[1] for s in stores[-2:]] == [MemoryAddress(2), MemoryAddress(2)]

    def test_branch_program_labels(self):
        result = compile_source(BRANCH_PROGRAM)
        assert result.program.labels == {"_else1": 13, "_endif2": 17}
        assert len(result.program) == 17

    def test_undeclared_variable_stops_before_codegen(self, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("code generated for an invalid program")

        monkeypatch.setattr(CodeGenerator, "_emit", fail)
        with pytest.raises(UndeclaredVariableError) as exc_info:
            compile_source("VAR result = 0;\nresult = x + 1;")
        assert exc_info.value.name == "x"
        assert (exc_info.value.location.line, exc_info.value.location.column) == (2, 10)

    def test_duplicate_declaration(self):
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            compile_source("VAR a = 1;\nVAR a = 2;")
        assert exc_info.value.name == "a"

    def test_errors_are_acc8_errors(self):
        with pytest.raises(Acc8Error):
            compile_source("VAR a = ;")
        with pytest.raises(CompilerError):
            compile_source("VAR a = 5 * 2;")


class TestResult:

    def test_result_stages(self):
        result = compile_source("VAR a = 1;", "prog.src")
        assert result.filename == "prog.src"
        assert result.tokens[-1].kind.name == "EOF"
        assert len(result.ast.statements) == 1
        assert result.symbols.addresses() == {"a": 0}
        assert [i.render() for i in result.instructions] == ["LOAD A, #1", "STORE A, 0x00"]

    def test_symbolic_and_resolved_streams(self):
        result = compile_source("VAR a = 1; IF a { }")
        assert any(i.opcode == Opcode.LABEL for i in result.instructions)
        assert all(i.opcode != Opcode.LABEL for i in result.program.instructions)

    def test_empty_program(self):
        result = compile_source("// nothing\n")
        assert len(result.program) == 0
        assert result.assembly == ""

    def test_deterministic(self):
        assert compile_source(BRANCH_PROGRAM).assembly == compile_source(BRANCH_PROGRAM).assembly

    def test_label_counter_fresh_per_compilation(self):
        compiler = Compiler()
        first = compiler.compile_source("VAR a = 1; IF a { }")
        second = compiler.compile_source("VAR a = 1; IF a { }")
        assert first.program.labels == second.program.labels == {"_else1": 7, "_endif2": 7}

    def test_concurrent_compilations(self):
        sources = [SUM_PROGRAM, BRANCH_PROGRAM] * 10
        expected = [compile_source(source).assembly for source in sources]
        compiler = Compiler()
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda s: compiler.compile_source(s).assembly, sources))
        assert results == expected


class TestOptions:

    def test_defaults(self):
        options = CompilerOptions()
        assert options.memory_size == 256
        assert options.variable_base_address == 0
        assert options.register_set == ("A", "B", "C", "D")
        assert options.zero_initialized_memory is True

    def test_register_set_normalized_to_tuple(self):
        assert CompilerOptions(register_set=["A", "B"]).register_set == ("A", "B")

    def test_base_address_applied(self):
        result = compile_source(SUM_PROGRAM, options=CompilerOptions(variable_base_address=0x80))
        assert result.assembly.splitlines()[-1] == "STORE A, 0x82"

    def test_zero_init_disabled(self):
        result = compile_source(SUM_PROGRAM, options=CompilerOptions(zero_initialized_memory=False))
        assert len(result.program) == 10

    def test_memory_limit(self):
        with pytest.raises(CompilerError):
            compile_source(SUM_PROGRAM, options=CompilerOptions(memory_size=2))

    @pytest.mark.parametrize("kwargs", [
        {"memory_size": 0},
        {"memory_size": -1},
        {"variable_base_address": 256},
        {"variable_base_address": -1},
        {"register_set": ("A",)},
        {"register_set": ()},
        {"register_set": ("A", "A")},
    ])
    def test_invalid_options(self, kwargs):
        with pytest.raises(ConfigurationError):
            CompilerOptions(**kwargs)


class TestCompileFile:

    def test_compile_file(self, tmp_path):
        source = tmp_path / "sum.src"
        source.write_text(SUM_PROGRAM)
        result = compile_file(source)
        assert result.filename == str(source)
        assert len(result.program) == 8

    def test_error_location_names_file(self, tmp_path):
        source = tmp_path / "bad.src"
        source.write_text("VAR a = 1;\nb = a;\n")
        with pytest.raises(UndeclaredVariableError) as exc_info:
            compile_file(source)
        assert exc_info.value.location.filename == str(source)
        assert exc_info.value.location.line == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            compile_file(tmp_path / "missing.src")
