from querysnoop.core.contracts import RunState
from querysnoop.pipeline.simulator import WebSearchModel
from querysnoop.pipeline.snooper import LONG_QUERY_CHARS, Snooper, is_long_query, mentions_friend

LONG = "hello world this is a very long query exceeding sixty characters total"


def test_filters():
    assert mentions_friend("hi friend")
    assert mentions_friend("FriendS forever")
    assert not mentions_friend("fiend")
    assert len(LONG) > LONG_QUERY_CHARS
    assert is_long_query(LONG)
    assert not is_long_query("x" * LONG_QUERY_CHARS)
    assert is_long_query("x" * (LONG_QUERY_CHARS + 1))


def test_example_queries(write_queries, capsys):
    p = write_queries(["hi friend", LONG])
    m = WebSearchModel(p)
    Snooper(m)

    res = m.pretend_to_search()

    assert res.state is RunState.COMPLETED
    out = capsys.readouterr().out.splitlines()
    assert out == ["Oh Yes! hi friend", f"So long {LONG}"]


def test_both_watchers_fire_in_registration_order(write_queries):
    q = "my friend typed a query long enough to cross the sixty character mark"
    assert len(q) > LONG_QUERY_CHARS
    got = []
    m = WebSearchModel(write_queries([q, "nothing here"]))
    Snooper(m, out=got.append)

    res = m.run()

    assert got == [f"Oh Yes! {q}", f"So long {q}"]
    assert (res.queries, res.notifications) == (2, 2)


def test_registers_two_named_watchers(tmp_path):
    m = WebSearchModel(tmp_path / "q.txt")
    Snooper(m, out=lambda s: None)
    assert [r.name for r in m.dispatcher.registrations] == ["friend", "long"]
