from pathlib import Path

from click.testing import CliRunner

from inkpot import __version__
from inkpot.build import BuildResult
from inkpot.cli import cli


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_init_scaffolds_project(tmp_path):
    runner = CliRunner()
    target = tmp_path / "mysite"
    result = runner.invoke(cli, ["init", str(target)])
    assert result.exit_code == 0
    assert (target / "inkpot.yaml").exists()
    assert (target / "content" / "_index.md").exists()
    assert (target / "templates" / "default.html.jinja").exists()
    assert (target / "templates" / "index.html.jinja").exists()
    assert (target / "public").is_dir()

    # refuses to overwrite an existing project
    result = runner.invoke(cli, ["init", str(target)])
    assert result.exit_code != 0
    assert "already exists" in result.output


def test_cli_init_then_build(tmp_path, monkeypatch):
    runner = CliRunner()
    runner.invoke(cli, ["init", str(tmp_path)])
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli, ["build"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Built 2 pages" in result.output
    index = (tmp_path / "public" / "index.html").read_text(encoding="utf-8")
    assert "Hello, World" in index
    assert (tmp_path / "public" / "blogs" / "hello-world.html").exists()


def test_cli_build_without_config_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "inkpot.yaml" in result.output


def test_cli_build_reports_failures(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def fake_build_site(root, config=None):
        return BuildResult(
            output_dir=root / "public",
            written=[root / "public" / "index.html"],
            failed=[root / "content" / "bad.md"],
        )

    monkeypatch.setattr("inkpot.build.build_site", fake_build_site)
    result = CliRunner().invoke(cli, ["build"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Built 1 pages" in result.output
    assert "(1 failed)" in result.output


def test_cli_serve_passes_port(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    called = {}

    class DummyServer:
        def __init__(self, root, port=None):
            called["root"] = root
            called["port"] = port

        def start(self):
            called["started"] = True

    monkeypatch.setattr("inkpot.server.PreviewServer", DummyServer)
    result = CliRunner().invoke(cli, ["serve", "--port", "5050"], catch_exceptions=False)
    assert result.exit_code == 0
    assert called == {"root": Path.cwd(), "port": 5050, "started": True}


def test_cli_serve_port_in_use(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    class BusyServer:
        def __init__(self, root, port=None):
            self.port = port

        def start(self):
            raise OSError(98, "Address already in use")

    monkeypatch.setattr("inkpot.server.PreviewServer", BusyServer)
    result = CliRunner().invoke(cli, ["serve", "--port", "5050"])
    assert result.exit_code == 1
    assert "Failed to start server: Address already in use" in result.output
    assert "Traceback" not in result.output


class FakePrompt:
    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer


def test_cli_md_creates_post(monkeypatch, tmp_path):
    CliRunner().invoke(cli, ["init", str(tmp_path)])
    monkeypatch.chdir(tmp_path)
    answers = iter(["My First Post", "my-first-post", "A short one"])
    monkeypatch.setattr(
        "inkpot.cli.questionary.text", lambda *args, **kwargs: FakePrompt(next(answers))
    )
    result = CliRunner().invoke(cli, ["md"], catch_exceptions=False)
    assert result.exit_code == 0
    post = tmp_path / "content" / "my-first-post.md"
    text = post.read_text(encoding="utf-8")
    assert text.startswith("---\ntitle: My First Post\n")
    assert "description: A short one" in text
    assert "author: Your Name" in text

    from inkpot.frontmatter import parse_frontmatter

    frontmatter, body = parse_frontmatter(text)
    assert frontmatter["title"] == "My First Post"
    assert len(frontmatter["date"]) == 10
    assert body == ""


def test_cli_md_refuses_existing_file(monkeypatch, tmp_path):
    CliRunner().invoke(cli, ["init", str(tmp_path)])
    monkeypatch.chdir(tmp_path)
    answers = iter(["Hello", "hello-world", ""])
    monkeypatch.setattr(
        "inkpot.cli.questionary.text", lambda *args, **kwargs: FakePrompt(next(answers))
    )
    result = CliRunner().invoke(cli, ["md"])
    assert result.exit_code != 0
    assert "File already exists" in result.output


def test_cli_md_aborts_on_cancel(monkeypatch, tmp_path):
    CliRunner().invoke(cli, ["init", str(tmp_path)])
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "inkpot.cli.questionary.text", lambda *args, **kwargs: FakePrompt(None)
    )
    result = CliRunner().invoke(cli, ["md"])
    assert result.exit_code != 0


def test_main_invokes_cli(monkeypatch):
    import inkpot.cli as cli_mod

    called = {}
    monkeypatch.setattr(cli_mod, "cli", lambda: called.setdefault("ran", True))
    cli_mod.main()
    assert called["ran"]
