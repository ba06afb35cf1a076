import os
import tempfile
from pathlib import Path

from querysnoop.core import log
from querysnoop.core.metrics import force_emit
from querysnoop.pipeline.simulator import WebSearchModel
from querysnoop.pipeline.snooper import Snooper

SAMPLE = [
    "hi friend",
    "weather tomorrow",
    "hello world this is a very long query exceeding sixty characters total",
    "",
    "My FRIEND asked a question that is also long enough to trip the second watcher",
]


def main():
    os.environ.setdefault("LOG_LEVEL", "INFO")
    log.setup()
    lg = log.get("demo.snooper")

    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "queries.txt"
        src.write_text("\n".join(SAMPLE) + "\n", encoding="utf-8")

        model = WebSearchModel(src)
        Snooper(model)
        result = model.pretend_to_search()
        lg.info("result %s", result.to_dict())

    force_emit(logger=log.get("metrics"), json_mode=(os.getenv("LOG_JSON", "0") == "1"))


if __name__ == "__main__":
    main()
