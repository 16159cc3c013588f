"""Tests for the logging setup and operator log output."""

import logging

import pytest

import procmesh
from procmesh.logging_config import OperatorTraceFilter, operator_names, setup_logging
from procmesh.mesh import Mesh


@pytest.fixture
def package_logger():
    """Restore the 'procmesh' logger after each test, keeping the package NullHandler."""
    logger = logging.getLogger("procmesh")
    yield logger
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def output_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if not isinstance(handler, logging.NullHandler)]


def make_record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 0, "message", None, None)


class TestSetupLogging:

    def test_package_is_silent_by_default(self):
        logger = logging.getLogger(procmesh.__name__)
        assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)

    def test_console_handler(self, package_logger):
        logger = setup_logging(logging.DEBUG)
        assert logger is package_logger
        assert logger.level == logging.DEBUG
        assert len(output_handlers(logger)) == 1

    def test_repeated_setup_does_not_duplicate(self, package_logger):
        setup_logging()
        setup_logging()
        assert len(output_handlers(package_logger)) == 1
        assert sum(isinstance(handler, logging.NullHandler) for handler in package_logger.handlers) == 1

    def test_file_handler(self, package_logger, tmp_path):
        log_file = tmp_path / "procmesh.log"
        setup_logging(log_file=str(log_file))
        assert len(output_handlers(package_logger)) == 2
        assert "traced operators: none." in log_file.read_text(encoding="utf-8")

    def test_unknown_operator(self, package_logger):
        with pytest.raises(ValueError, match="Unknown operators"):
            setup_logging(operators=["extrude", "bevel"])
        assert output_handlers(package_logger) == []


class TestOperatorTracing:

    def test_operator_names(self):
        assert operator_names() == ["extrude", "marching_triangles", "smoothing", "subdivide", "triangulate"]

    def test_filter(self):
        trace_filter = OperatorTraceFilter(logging.WARNING, ["extrude"])
        assert trace_filter.filter(make_record("procmesh.operators.extrude", logging.DEBUG))
        assert not trace_filter.filter(make_record("procmesh.operators.triangulate", logging.DEBUG))
        assert not trace_filter.filter(make_record("procmesh.mesh", logging.INFO))
        assert trace_filter.filter(make_record("procmesh.mesh", logging.WARNING))

    def test_traced_operator_reaches_log_file(self, package_logger, unit_cube: Mesh, tmp_path):
        """Debug output of a traced operator is written; other debug output is not."""
        log_file = tmp_path / "procmesh.log"
        setup_logging(logging.INFO, log_file=str(log_file), operators=["extrude"])
        assert package_logger.level == logging.DEBUG

        unit_cube.extrude([unit_cube.faces[0]], (0.0, 1.0, 0.0))
        unit_cube.triangulate()

        text = log_file.read_text(encoding="utf-8")
        assert "traced operators: extrude." in text
        assert "Extruded 1 faces" in text
        assert "Triangulated" not in text


class TestOperatorLogging:

    def test_operators_log_debug(self, unit_cube: Mesh, caplog):
        with caplog.at_level(logging.DEBUG, logger="procmesh"):
            unit_cube.triangulate()
            unit_cube.subdivide()
            unit_cube.export()
        assert "Triangulated 6 faces into 12 triangles." in caplog.text
        assert "Subdivision level 1" in caplog.text
        assert "Exported 48 faces" in caplog.text
