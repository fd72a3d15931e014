from __future__ import annotations

import re

from loguru import logger

from aftershocks.log import setup_logging


def test_setup_logging_format(capsys):
    setup_logging("info", force=True)
    logger.info("hello")

    lines = capsys.readouterr().err.splitlines()
    assert re.match(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \| INFO \| hello$", lines[-1])


def test_setup_logging_respects_level(capsys):
    setup_logging("WARNING", force=True)
    logger.info("quiet")
    logger.warning("loud")

    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "| WARNING | loud" in err
