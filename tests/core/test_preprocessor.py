# SPDX-License-Identifier: MIT
"""Tests for ccbuild.core.preprocessor."""

from pathlib import Path

import pytest

from ccbuild.core.preprocessor import Preprocessor, Status

COMPILE = Status.COMPILE
SKIP = Status.SKIP
NOT_UNDERSTOOD = Status.NOT_UNDERSTOOD


def classify(preprocessor: Preprocessor, text: str) -> list[Status]:
    return [preprocessor.process(line.strip()) for line in text.split("\n")]


@pytest.fixture
def include_dir(tmp_path: Path) -> str:
    (tmp_path / "stdio.h").write_text("")
    (tmp_path / "sys").mkdir()
    (tmp_path / "sys" / "event.h").write_text("")
    return str(tmp_path) + "/"


class TestGolden:
    def test_nested_conditionals(self, include_dir):
        """Classify a nested platform-selection block line by line."""
        pp = Preprocessor({"__FreeBSD__": "1"}, [include_dir])
        contents = (
            "#if defined(__FreeBSD__)\n"
            "#if __has_include(<stdio.h>)\n"
            '#include "snn/example/impl/fbsd_stdio.hh"\n'
            "#else\n"
            '#include "snn/example/impl/fbsd.hh"\n'
            "#endif\n"
            "#elif defined(__linux__)\n"
            '#include "snn/example/impl/linux.hh"\n'
            "#else\n"
            '#include "snn/example/impl/portable.hh"\n'
            "#endif\n"
        )

        assert classify(pp, contents) == [
            COMPILE,
            COMPILE,
            COMPILE,
            SKIP,
            SKIP,
            COMPILE,
            SKIP,
            SKIP,
            SKIP,
            SKIP,
            COMPILE,
            COMPILE,
        ]


class TestDefined:
    def test_defined(self):
        pp = Preprocessor({"FOO": "1"}, [])
        assert pp.process("#if defined(FOO)") is COMPILE

    def test_not_defined(self):
        pp = Preprocessor({}, [])
        assert pp.process("#if defined(FOO)") is SKIP

    def test_negated(self):
        pp = Preprocessor({"FOO": "1"}, [])
        assert pp.process("#if !defined(FOO)") is SKIP

    def test_negated_not_defined(self):
        pp = Preprocessor({}, [])
        assert pp.process("#if !defined(FOO)") is COMPILE

    def test_space_after_hash(self):
        pp = Preprocessor({"FOO": "1"}, [])
        assert pp.process("#  if defined(FOO)") is COMPILE
        assert pp.process("#\tendif") is COMPILE

    @pytest.mark.parametrize(
        "line",
        [
            "#if defined(FOO) && defined(BAR)",
            "#if defined(FOO)x",
            "#if defined(9FOO)",
            "#if defined FOO",
            "#if defined(FOO",
            "#if FOO",
            "#if 1",
            "#if ! defined(FOO)",
        ],
    )
    def test_not_understood(self, line):
        pp = Preprocessor({"FOO": "1"}, [])
        assert pp.process(line) is NOT_UNDERSTOOD


class TestHasInclude:
    def test_positive_without_match(self, include_dir):
        pp = Preprocessor({}, [include_dir])
        assert pp.process("#if __has_include(<missing.h>)") is SKIP

    def test_negated_without_match(self, include_dir):
        pp = Preprocessor({}, [include_dir])
        assert pp.process("#if !__has_include(<missing.h>)") is COMPILE

    def test_positive_with_match(self, include_dir):
        pp = Preprocessor({}, [include_dir])
        assert pp.process("#if __has_include(<sys/event.h>)") is COMPILE

    def test_negated_with_match(self, include_dir):
        pp = Preprocessor({}, [include_dir])
        assert pp.process("#if !__has_include(<stdio.h>)") is SKIP

    def test_any_include_path_matches(self, tmp_path, include_dir):
        empty = tmp_path / "empty"
        empty.mkdir()
        pp = Preprocessor({}, [str(empty) + "/", include_dir])
        assert pp.process("#if __has_include(<stdio.h>)") is COMPILE

    @pytest.mark.parametrize(
        "line",
        [
            '#if __has_include("stdio.h")',
            "#if __has_include(<stdio.h>) x",
            "#if __has_include(<stdio.h>",
            "#if __has_include(<std io.h>)",
        ],
    )
    def test_not_understood(self, include_dir, line):
        pp = Preprocessor({}, [include_dir])
        assert pp.process(line) is NOT_UNDERSTOOD


class TestBranches:
    def test_else_after_taken_if(self):
        pp = Preprocessor({"A": "1"}, [])
        assert classify(pp, "#if defined(A)\n#else\n#endif") == [COMPILE, SKIP, COMPILE]

    def test_else_after_skipped_if(self):
        pp = Preprocessor({}, [])
        assert classify(pp, "#if defined(A)\n#else\n#endif") == [SKIP, COMPILE, COMPILE]

    def test_only_one_branch_compiles(self):
        """Once a branch is taken no later branch in the chain compiles."""
        pp = Preprocessor({"A": "1", "B": "1", "C": "1"}, [])
        statuses = classify(
            pp,
            "#if defined(A)\n#elif defined(B)\n#elif defined(C)\n#else\n#endif",
        )
        assert statuses == [COMPILE, SKIP, SKIP, SKIP, COMPILE]

    def test_elif_taken(self):
        pp = Preprocessor({"B": "1"}, [])
        statuses = classify(
            pp, "#if defined(A)\n#elif defined(B)\n#elif defined(B)\n#else\n#endif"
        )
        assert statuses == [SKIP, COMPILE, SKIP, SKIP, COMPILE]

    def test_not_understood_blocks_later_branches(self):
        pp = Preprocessor({"B": "1"}, [])
        statuses = classify(pp, "#if FOO\n#elif defined(B)\n#endif")
        assert statuses == [NOT_UNDERSTOOD, NOT_UNDERSTOOD, COMPILE]

    def test_not_understood_then_else(self):
        pp = Preprocessor({}, [])
        statuses = classify(pp, "#if FOO\n#else\n#endif")
        assert statuses == [NOT_UNDERSTOOD, NOT_UNDERSTOOD, COMPILE]

    def test_nested_if_in_skipped_branch_is_not_evaluated(self):
        pp = Preprocessor({"B": "1"}, [])
        statuses = classify(
            pp,
            "#if defined(A)\n#if defined(B)\n#else\n#endif\n#endif",
        )
        assert statuses == [SKIP, SKIP, SKIP, SKIP, COMPILE]

    def test_nested_not_understood_in_skipped_branch(self):
        pp = Preprocessor({}, [])
        assert classify(pp, "#if defined(A)\n#if garbage\n#endif\n#endif") == [
            SKIP,
            SKIP,
            SKIP,
            COMPILE,
        ]


class TestMisc:
    def test_plain_lines_keep_state(self):
        pp = Preprocessor({}, [])
        assert pp.process("int x;") is COMPILE
        pp.process("#if defined(A)")
        assert pp.process("int y;") is SKIP

    def test_unknown_directive_keeps_state(self):
        pp = Preprocessor({}, [])
        assert pp.process("#pragma once") is COMPILE
        assert pp.process('#include "a.hh"') is COMPILE
        assert pp.process("#define FOO 1") is COMPILE

    def test_endif_on_empty_stack(self):
        pp = Preprocessor({}, [])
        assert pp.process("#endif") is COMPILE
        assert pp.depth == 0

    def test_depth(self):
        pp = Preprocessor({"A": "1"}, [])
        pp.process("#if defined(A)")
        pp.process("#if defined(A)")
        assert pp.depth == 2
        pp.process("#endif")
        assert pp.depth == 1

    def test_macro_table_is_not_copied(self):
        macros: dict[str, str] = {}
        pp = Preprocessor(macros, [])
        macros["LATE"] = "1"
        assert pp.is_defined("LATE")
