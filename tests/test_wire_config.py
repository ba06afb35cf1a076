import textwrap
from pathlib import Path

import pytest

from querysnoop.core.contracts import RunState
from querysnoop.core.errors import InputMissing, InvalidArgument
from querysnoop.wire_config import build_from_yaml

CAPTURED = []


def starts_with_q(query):
    return query.startswith("q")


def capture(query):
    CAPTURED.append(query)


def _yaml(tmp_path: Path, body: str) -> Path:
    p = tmp_path / "wiring.yaml"
    p.write_text(textwrap.dedent(body), encoding="utf-8")
    return p


def test_build_with_snooper_and_extra_observer(tmp_path, write_queries):
    write_queries(["hi friend", "quiet", "nope"])
    cfg = _yaml(tmp_path, f"""
        source: queries.txt
        snooper: true
        observers:
          - name: q-words
            filter: {{module: {__name__}, attr: starts_with_q}}
            observer: {{module: {__name__}, attr: capture}}
    """)
    CAPTURED.clear()
    out = []

    model = build_from_yaml(str(cfg), out=out.append)
    res = model.run()

    assert res.state is RunState.COMPLETED
    assert out == ["Oh Yes! hi friend"]
    assert CAPTURED == ["quiet"]
    assert [r.name for r in model.dispatcher.registrations] == ["friend", "long", "q-words"]


def test_source_relative_to_yaml(tmp_path, write_queries):
    write_queries(["a"])
    model = build_from_yaml(str(_yaml(tmp_path, "source: queries.txt\n")))
    assert Path(model.source) == tmp_path / "queries.txt"
    assert model.raise_errors is False


def test_raise_errors_flag(tmp_path):
    model = build_from_yaml(str(_yaml(tmp_path, "source: missing.txt\nraise_errors: true\n")))
    with pytest.raises(InputMissing):
        model.run()


def test_source_required(tmp_path):
    with pytest.raises(InvalidArgument):
        build_from_yaml(str(_yaml(tmp_path, "snooper: true\n")))


def test_bad_observer_reference(tmp_path):
    cfg = _yaml(tmp_path, """
        source: q.txt
        observers:
          - filter: {module: os.path}
            observer: {module: os.path, attr: basename}
    """)
    with pytest.raises(InvalidArgument):
        build_from_yaml(str(cfg))


def test_missing_wiring_file(tmp_path):
    with pytest.raises(InputMissing):
        build_from_yaml(str(tmp_path / "nope.yaml"))
