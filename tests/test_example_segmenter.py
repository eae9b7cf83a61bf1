from hypothesis import given, strategies as st

from pkgctx.extractors.rd.example_segmenter import ExampleSegmenter, remove_wrappers, segment_examples


def codes(text, **kwargs):
    return [block.code for block in segment_examples(text, **kwargs)]


def test_dontrun_wrapper_is_removed():
    assert codes("\\dontrun{\nfoo(1)\n}") == ["foo(1)"]


def test_remove_wrappers_keeps_nested_content():
    assert remove_wrappers("a\\donttest{b\\dontshow{c}d}e") == "abcde"


def test_unterminated_wrapper_loses_only_its_marker():
    assert remove_wrappers("\\dontrun{foo(1)") == "foo(1)"


def test_multi_line_call_stays_in_one_block():
    assert codes("x <- c(1,\n       2, 3)\nmean(x)") == ["x <- c(1,\n       2, 3)", "mean(x)"]


def test_blank_line_inside_open_call_is_swallowed():
    assert codes("f(a,\n\n  b)") == ["f(a,\n  b)"]


def test_blocks_are_capped():
    text = "a <- 1\nb <- 2\nc <- 3\nd <- 4"

    assert codes(text) == ["a <- 1", "b <- 2", "c <- 3"]
    assert codes(text, max_blocks=1) == ["a <- 1"]


def test_parenthesis_inside_string_does_not_open_a_call():
    assert codes('x <- "("\nprint(x)') == ['x <- "("', "print(x)"]


def test_escaped_quote_does_not_end_string():
    assert codes('cat("say \\"hi\\" (")') == ['cat("say \\"hi\\" (")']


def test_comments():
    assert codes("# A comment\nfoo(1) # trailing (\n") == ["foo(1) # trailing ("]


def test_brace_block_is_kept_whole():
    assert codes("if (TRUE) {\n  print(1)\n}") == ["if (TRUE) {\n  print(1)\n}"]


def test_trailing_operator_continues_the_statement():
    assert codes("x <- 1 +\n  2") == ["x <- 1 +\n  2"]


def test_escaped_percent_is_unescaped():
    assert codes("x \\%in\\% y") == ["x %in% y"]


def test_invalid_blocks_are_discarded():
    assert codes("\\keyword{x}\nfoo()") == ["foo()"]
    assert codes("}\nbar()") == ["bar()"]


def test_unbalanced_trailing_block_is_discarded():
    assert codes("foo(1,\n2") == []


def test_block_is_dedented():
    assert codes("  x <- 1\n  y <- x") == ["x <- 1", "y <- x"]


def _final_state(code):
    depth = 0
    quote = None
    for ch in code:
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
    return depth, quote


@given(st.text(alphabet="ab()\"' ,=\n{}", max_size=60))
def test_blocks_are_balanced(text):
    for block in ExampleSegmenter(max_blocks=10).segment(text):
        assert _final_state(block.code) == (0, None)


def test_escaped_backslash_is_unescaped():
    # Rd source gsub("\\\\.", "", x) is the R code gsub("\\.", "", x)
    assert codes('gsub("\\\\\\\\.", "", x)\nx') == ['gsub("\\\\.", "", x)', "x"]
