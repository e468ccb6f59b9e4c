"""Example: a file logger rotating by size and by day.

Run with:
    python examples/rotating_file_example.py

Writes ``logs/worker.log`` and moves it to ``logs/worker.log-<timestamp>``
whenever the next record would push it past 4 KiB or a day boundary has
passed. Repeated messages are sampled: the first 5 per second pass, then
every 50th.
"""

import logging

import solulog
from solulog.adapters.logging import SolulogHandler

solulog.init(
    solulog.LoggerConfig(
        level="info",
        console=False,
        file=solulog.FileSinkConfig(
            "worker.log", directory="logs", max_size=4096, rotation="daily"
        ),
        sampling=solulog.SamplingConfig(first=5, thereafter=50),
    )
)

# Third-party libraries logging through the stdlib end up in the same file.
logging.getLogger().addHandler(SolulogHandler(solulog.get_logger()))
logging.getLogger().setLevel(logging.INFO)


def main() -> None:
    job = solulog.in_context(solulog.fork()).named("worker")
    for n in range(1_000):
        job.info("processed batch", batch=n)
    logging.getLogger("vendor.client").warning("retrying upstream call")
    solulog.sync()


if __name__ == "__main__":
    main()
