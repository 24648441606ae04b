import math
import os
import re

import pytest

from bash_template.template import bash, cut_first, cut_last, render, resolve, split_format


# (fragments, values, expected) for the classic omission table.
CASES = [
    (["run -t", ""], [1], "run -t1"),
    (["run -t", ""], [None], "run"),
    (["run -t", ""], [True], "run -ttrue"),
    (["run -t", ""], [False], "run"),
    (["run -t", " task"], [1], "run -t1 task"),
    (["run -t", " task"], [None], "run task"),
    (['run -t="', '"'], [1], 'run -t="1"'),
    (['run -t="', '"'], [None], "run"),
    (['run -t="', '" task'], [1], 'run -t="1" task'),
    (['run -t="', '" task'], [None], "run task"),
    (["run -t", " -u", " task"], [1, 2], "run -t1 -u2 task"),
    (["run -t", " -u", " task"], [1, None], "run -t1 task"),
    (["run -t", " -u", " task"], [None, 2], "run -u2 task"),
    (["run -t", " -u", " task"], [None, None], "run task"),
    (['run -t"', '" -u"', '" task'], [None, None], "run task"),
    (['run "', '" task'], [None], "run task"),
    (["run ", " task"], [None], "run task"),
    (["TEST=", " run"], [None], "run"),
    (["TEST=", " run"], [1], "TEST=1 run"),
    (["TEST=", ""], [1], "TEST=1"),
    (["TEST=", ""], [None], ""),
    (['--test="', '.0" ', ""], [None, 1], "1"),
]


@pytest.mark.parametrize("fragments,values,expected", CASES)
def test_bash_omits_flags_for_missing_values(fragments, values, expected):
    assert bash(fragments, *values) == expected


def test_single_fragment_is_returned_verbatim():
    assert bash(["this is a test"]) == "this is a test"
    assert bash(["this is a test "]) == "this is a test "
    assert bash(["  a\t\tb\n"]) == "  a\t\tb\n"


def test_nan_is_omitted_like_none():
    assert bash(["run -t", " task"], math.nan) == "run task"
    assert bash(["run -t", " task"], float("nan")) == "run task"


def test_zero_and_empty_string_are_kept():
    assert bash(["run -t", " task"], 0) == "run -t0 task"
    assert bash(["run -t", " task"], "") == "run -t task"


def test_lists_are_joined_with_single_spaces():
    assert bash(["cc ", " -o out"], ["a.c", "b.c", "c.c"]) == "cc a.c b.c c.c -o out"
    assert bash(["cc ", " -o out"], ("x", 1, True)) == "cc x 1 true -o out"


def test_nan_list_items_are_kept():
    assert bash(["cc ", ""], ["a", math.nan, "b"]) == "cc a NaN b"


def test_empty_list_is_not_omitted():
    assert bash(["cc ", " -o out"], []) == "cc -o out"


def test_numbers_use_shortest_decimal_form():
    assert bash(["sleep ", ""], 1.0) == "sleep 1"
    assert bash(["sleep ", ""], 0.25) == "sleep 0.25"
    assert bash(["sleep ", ""], -3) == "sleep -3"


def test_unknown_types_fall_back_to_str():
    class Thing:
        def __str__(self):
            return "thing"

    assert bash(["use ", ""], Thing()) == "use thing"


def test_whitespace_is_normalized_when_interpolating():
    out = bash(["  run\t\t-t", "\n\n  task   "], 1)
    assert out == "run -t1 task"
    assert not re.search(r"\s{2,}", out)


def test_omission_removes_exactly_one_word_each_side():
    out = bash(["build --release --target=", " --jobs 4"], None)
    assert out == "build --release --jobs 4"


def test_omission_at_template_edges():
    assert bash(["", " run"], None) == "run"
    assert bash(["run ", ""], None) == "run"


def test_shape_mismatch_is_rejected():
    with pytest.raises(ValueError):
        bash(["a", "b"])
    with pytest.raises(ValueError):
        bash([], 1)


def test_cut_helpers_split_on_single_spaces():
    assert cut_last("run -t") == "run"
    assert cut_last("TEST=") == ""
    assert cut_first('" task') == "task"
    assert cut_first(" task") == "task"
    assert cut_first("") == ""


def test_split_format_reads_positional_and_keyword_fields():
    fragments, values = split_format("run -t{} -u{name} {}", (1, 2), {"name": "x"})
    assert fragments == ["run -t", " -u", " ", ""]
    assert values == [1, "x", 2]

    fragments, values = split_format("run {1} {0}", (1, 2))
    assert values == [2, 1]


def test_render_resolves_attribute_and_index_fields():
    class Project:
        name = "demo"

    assert render("cp {src[0]} dst", src=["a.txt"]) == "cp a.txt dst"
    assert render("run -u{p.name} task", p=Project()) == "run -udemo task"
    assert render("run -t{opts[tag]} task", opts={"tag": None}) == "run task"
    assert render("cp {0[1]} dst", ["a", "b"]) == "cp b dst"
    assert render("run -u{p.name} task") == "run task"


def test_render_rejects_unresolvable_fields():
    with pytest.raises(ValueError):
        render("cp {src[3]} dst", src=["a.txt"])
    with pytest.raises(ValueError):
        render("run {p.missing}", p=object())


def test_render_rejects_mixed_field_numbering():
    with pytest.raises(ValueError):
        render("run {} {0}", 1)
    with pytest.raises(ValueError):
        render("run {0} {}", 1)


def test_render_drops_flags_for_unknown_names():
    assert render("run -t{tag} -u{user} task", user="me") == "run -ume task"
    assert render("run -t{} -u{} task", None, False) == "run task"


def test_render_keeps_literal_braces():
    assert render("echo {{}} -n{}", 2) == "echo {} -n2"
    assert render("echo ${{HOME}}") == "echo ${HOME}"


def test_render_without_fields_is_not_normalized():
    assert render("this  is a test ") == "this  is a test "


def test_render_rejects_conversions_and_specs():
    with pytest.raises(ValueError):
        render("run {!r}", 1)
    with pytest.raises(ValueError):
        render("run {:>4}", 1)


def test_render_requires_enough_positional_args():
    with pytest.raises(ValueError):
        render("run {} {}", 1)
    with pytest.raises(ValueError):
        render("run {3}", 1)


def test_resolve_returns_absolute_paths():
    cwd = os.getcwd()
    assert resolve(["a/b/c"]) == os.path.join(cwd, "a", "b", "c")
    here = os.path.dirname(os.path.abspath(__file__))
    assert resolve(["", "/../cmake"], here) == os.path.abspath(os.path.join(here, "..", "cmake"))


def test_resolve_nests():
    here = os.path.dirname(os.path.abspath(__file__))
    dist = resolve(["", "/../python/dist"], here)
    assert resolve(["", "/obj"], dist) == os.path.join(os.path.abspath(os.path.join(here, "..", "python", "dist")), "obj")
