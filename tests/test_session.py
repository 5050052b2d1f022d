"""
Tests for the generation session — orchestration, failures, incrementality.
"""

import os
from pathlib import Path

import pytest

from tmplgen.adapters.mock import MockBackend
from tmplgen.core.engine.session import (
    GenerationReport,
    GenerationSession,
    SessionState,
    run_batch,
)
from tmplgen.core.models.generation import (
    FileResult,
    GenerationError,
    InputDescriptor,
    OutputDescriptor,
    ProjectContext,
)
from tmplgen.core.services import output_writer

SEP = os.sep


def _context(project_dir: Path, cache_dir: Path, **kwargs) -> ProjectContext:
    return ProjectContext(project_root=str(project_dir), cache_directory=str(cache_dir), **kwargs)


def _inputs(*paths: Path) -> list[InputDescriptor]:
    return [InputDescriptor(path=str(p)) for p in paths]


# ── Happy path ───────────────────────────────────────────────────────


class TestGenerate:
    def test_scenario(self, project_dir, cache_dir, make_template, mock_backend):
        template = make_template("Views/Home/Index.tmpl")

        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(template))

        assert report.success
        assert report.state is SessionState.COMPLETED
        expected = cache_dir / "Views" / "Home" / "Index.generated.cs"
        assert len(report.outputs) == 1
        out = report.outputs[0]
        assert out.output_path == str(expected)
        assert out.auto_generated is True
        assert out.dependent_upon == "Index.tmpl"
        assert out.namespace == "Views.Home"

        file = report.files[0]
        assert file.relative_path == f"{SEP}Views{SEP}Home{SEP}Index.tmpl"
        assert file.status == "ok"

        generated = mock_backend.call_log[0]
        assert generated.absolute_path == str(template)
        assert generated.relative_path == file.relative_path
        assert generated.namespace == "Views.Home"

    def test_writes_bom_encoded_output(self, project_dir, cache_dir, make_template, mock_backend):
        template = make_template("a.tmpl")
        mock_backend.set_output("a.tmpl", "class A: ✓\n")

        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(template))

        data = Path(report.outputs[0].output_path).read_bytes()
        assert data == b"\xef\xbb\xbf" + "class A: ✓\n".encode("utf-8")

    def test_root_namespace_and_override(self, project_dir, cache_dir, make_template, mock_backend):
        a = make_template("Views/a.tmpl")
        b = make_template("Views/b.tmpl")
        inputs = [
            InputDescriptor(path=str(a)),
            InputDescriptor(path=str(b), namespace="Custom.Space"),
        ]

        report = run_batch(mock_backend, _context(project_dir, cache_dir, root_namespace="App"), inputs)

        assert [o.namespace for o in report.outputs] == ["App.Views", "Custom.Space"]

    def test_relative_input_resolved_against_project_root(
        self, project_dir, cache_dir, make_template, mock_backend
    ):
        make_template("Views/Home/Index.tmpl")
        inputs = [InputDescriptor(path=os.path.join("Views", "Home", "Index.tmpl"))]

        report = run_batch(mock_backend, _context(project_dir, cache_dir), inputs)

        assert report.success
        assert report.outputs[0].source_path == str(project_dir / "Views" / "Home" / "Index.tmpl")

    def test_parent_relative_input_stays_in_cache(
        self, project_dir, cache_dir, make_template, mock_backend
    ):
        template = make_template("../outside/x.tmpl")
        inputs = [InputDescriptor(path="../outside/x.tmpl")]

        report = run_batch(mock_backend, _context(project_dir, cache_dir), inputs)

        assert report.success
        assert report.outputs[0].source_path == os.path.normpath(str(template))
        written = os.path.realpath(report.outputs[0].output_path)
        assert written.startswith(os.path.realpath(cache_dir) + os.sep)
        assert os.path.exists(written)

    def test_dot_segments_folded_inside_project(self, project_dir, cache_dir, make_template, mock_backend):
        make_template("Shared/a.tmpl")
        inputs = [InputDescriptor(path=os.path.join("Views", "..", "Shared", "a.tmpl"))]

        report = run_batch(mock_backend, _context(project_dir, cache_dir), inputs)

        assert report.success
        assert report.files[0].relative_path == f"{SEP}Shared{SEP}a.tmpl"
        assert report.outputs[0].output_path == str(cache_dir / "Shared" / "a.generated.cs")
        assert report.outputs[0].namespace == "Shared"

    def test_empty_project_root_uses_cwd(self, project_dir, cache_dir, make_template, mock_backend, monkeypatch):
        template = make_template("Views/a.tmpl")
        monkeypatch.chdir(project_dir)

        report = run_batch(
            mock_backend,
            ProjectContext(cache_directory=str(cache_dir)),
            _inputs(template),
        )

        assert report.success
        assert mock_backend.last_project_root == os.getcwd()
        assert report.outputs[0].namespace == "Views"

    def test_empty_batch(self, project_dir, cache_dir, mock_backend):
        report = run_batch(mock_backend, _context(project_dir, cache_dir), [])
        assert report.success
        assert report.outputs == []
        assert mock_backend.contexts_opened == 0

    def test_context_released(self, project_dir, cache_dir, make_template, mock_backend):
        run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(make_template("a.tmpl")))
        assert mock_backend.contexts_opened == 1
        assert mock_backend.contexts_closed == 1


# ── Incrementality ───────────────────────────────────────────────────


class TestIncremental:
    def test_second_run_regenerates_nothing(self, project_dir, cache_dir, make_template, mock_backend):
        inputs = _inputs(make_template("a.tmpl"), make_template("sub/b.tmpl"))
        ctx = _context(project_dir, cache_dir)

        first = run_batch(mock_backend, ctx, inputs)
        second = run_batch(mock_backend, ctx, inputs)

        assert len(first.outputs) == 2
        assert second.success
        assert second.outputs == []
        assert second.skipped == 2
        assert mock_backend.call_count == 2

    def test_touched_template_regenerated(self, project_dir, cache_dir, make_template, mock_backend):
        a = make_template("a.tmpl")
        b = make_template("b.tmpl")
        ctx = _context(project_dir, cache_dir)
        run_batch(mock_backend, ctx, _inputs(a, b))

        future = Path(cache_dir / "a.generated.cs").stat().st_mtime + 100
        os.utime(a, (future, future))
        report = run_batch(mock_backend, ctx, _inputs(a, b))

        assert [o.dependent_upon for o in report.outputs] == ["a.tmpl"]
        assert report.skipped == 1
        assert "up to date" in " ".join(report.messages)


# ── Failures ─────────────────────────────────────────────────────────


class TestFailures:
    def test_structured_error_fails_file(self, project_dir, cache_dir, make_template, mock_backend):
        a = make_template("a.tmpl")
        mock_backend.set_errors("a.tmpl", GenerationError(message="bad directive", line=3, column=4))

        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(a))

        assert not report.success
        assert report.state is SessionState.FAILED
        assert report.outputs == []
        assert not (cache_dir / "a.generated.cs").exists()
        assert report.files[0].status == "failed"
        assert report.files[0].errors[0].message == "bad directive"
        assert any("(3:4) bad directive" in m for m in report.messages)

    def test_structured_error_stops_batch_by_default(
        self, project_dir, cache_dir, make_template, mock_backend
    ):
        inputs = _inputs(make_template("a.tmpl"), make_template("b.tmpl"))
        mock_backend.set_errors("a.tmpl", "oops")

        report = run_batch(mock_backend, _context(project_dir, cache_dir), inputs)

        assert not report.success
        assert mock_backend.call_count == 1
        assert not (cache_dir / "b.generated.cs").exists()

    def test_continue_on_error(self, project_dir, cache_dir, make_template, mock_backend):
        inputs = _inputs(make_template("a.tmpl"), make_template("b.tmpl"))
        mock_backend.set_errors("a.tmpl", "oops", "and another")

        report = run_batch(
            mock_backend, _context(project_dir, cache_dir), inputs, continue_on_error=True
        )

        assert not report.success
        assert report.status == "partial"
        assert [o.dependent_upon for o in report.outputs] == ["b.tmpl"]
        assert len(report.files[0].errors) == 2

    def test_exception_aborts_remaining_files(self, project_dir, cache_dir, make_template, mock_backend):
        templates = [make_template(f"f{i}.tmpl") for i in range(1, 6)]
        mock_backend.set_exception("f3.tmpl", RuntimeError("backend crashed"))

        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(*templates))

        assert not report.success
        assert mock_backend.call_count == 3
        assert [o.dependent_upon for o in report.outputs] == ["f1.tmpl", "f2.tmpl"]
        assert (cache_dir / "f1.generated.cs").exists()
        assert (cache_dir / "f2.generated.cs").exists()
        for i in (3, 4, 5):
            assert not (cache_dir / f"f{i}.generated.cs").exists()
        assert report.files[-1].errors[0].message == "backend crashed"
        assert mock_backend.contexts_closed == 1

    def test_errors_reported_before_exception_are_kept(
        self, project_dir, cache_dir, make_template, mock_backend
    ):
        a = make_template("a.tmpl")
        mock_backend.set_errors("a.tmpl", "early problem")
        mock_backend.set_exception("a.tmpl", RuntimeError("boom"))

        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(a))

        assert not report.success
        errors = report.files[0].errors
        assert [e.message for e in errors] == ["early problem", "boom"]
        assert errors[-1].code == "exception"
        assert not (cache_dir / "a.generated.cs").exists()

    def test_unexpected_error_is_caught(self, project_dir, cache_dir, make_template):
        class BrokenBackend(MockBackend):
            def output_extension(self, file_name: str) -> str:
                raise ValueError("no extension for you")

        backend = BrokenBackend()
        report = run_batch(backend, _context(project_dir, cache_dir), _inputs(make_template("a.tmpl")))

        assert not report.success
        assert report.error == "no extension for you"
        assert backend.contexts_closed == 1

    def test_missing_input_fails_batch(self, project_dir, cache_dir, mock_backend):
        mock_backend.set_exception("missing.tmpl", FileNotFoundError("missing.tmpl"))
        report = run_batch(
            mock_backend, _context(project_dir, cache_dir), _inputs(project_dir / "missing.tmpl")
        )
        assert not report.success
        assert report.outputs == []

    def test_duplicate_output_path(self, project_dir, cache_dir, make_template, mock_backend):
        a = make_template("a.tmpl")

        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(a, a))

        assert not report.success
        assert len(report.outputs) == 1
        assert "already produced" in report.files[1].errors[0].message

    def test_session_runs_once(self, project_dir, cache_dir, mock_backend):
        session = GenerationSession(mock_backend, _context(project_dir, cache_dir))
        session.run([])
        with pytest.raises(RuntimeError):
            session.run([])


# ── Report ───────────────────────────────────────────────────────────


class TestGenerationReport:
    def test_status(self):
        assert GenerationReport(success=True).status == "ok"
        assert GenerationReport(success=False).status == "failed"
        partial = GenerationReport(
            success=False,
            files=[
                FileResult(source_path="a", status="ok"),
                FileResult(source_path="b", status="failed"),
            ],
        )
        assert partial.status == "partial"

    def test_to_dict(self):
        report = GenerationReport(
            success=True,
            state=SessionState.COMPLETED,
            outputs=[OutputDescriptor(output_path="/c/a.py", dependent_upon="a.tmpl")],
            files=[FileResult(source_path="/p/a.tmpl", status="ok")],
        )
        d = report.to_dict()
        assert d["status"] == "ok"
        assert d["state"] == "completed"
        assert d["generated"] == 1
        assert d["outputs"][0]["auto_generated"] is True
        assert d["outputs"][0]["dependent_upon"] == "a.tmpl"

    def test_decoded_output_matches_backend_text(self, project_dir, cache_dir, make_template, mock_backend):
        mock_backend.set_output("a.tmpl", "x = 1\n")
        report = run_batch(mock_backend, _context(project_dir, cache_dir), _inputs(make_template("a.tmpl")))
        data = Path(report.outputs[0].output_path).read_bytes()
        assert output_writer.decode(data) == "x = 1\n"
