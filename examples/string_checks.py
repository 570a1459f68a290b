import utest


def slugify(text):
    return "-".join(text.lower().split())


@utest.case(context="Strings")
def slugify_joins_words(t):
    t.equal(slugify("Hello Big World"), "hello-big-world")


@utest.case(context="Strings")
def slugify_collapses_whitespace(t):
    t.equal(slugify("  a \t b  "), "a-b")
    t.is_false(slugify(""), "empty input gives empty slug")


utest.add_test(lambda: slugify("X") == "x", "plain_predicate_registration", "Strings")
