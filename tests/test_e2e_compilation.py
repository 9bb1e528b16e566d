"""
End-to-end compilation tests

Tests the full pipeline: template sources → TemplateLoader → Compiler →
generated JavaScript modules

Validates that template sets with real custom tags, inheritance and
re-exports compile correctly through the lxml parser.
"""

import asyncio
import tempfile
from pathlib import Path

import pytest

from tagwright.lib.loader import ModuleLoadError, TemplateLoader, ref_resolve


CARD = """<html>
<head><meta accepts="[body]" as="content"></head>
<body><div class="card"><content></content></div></body>
</html>"""

APP = """<html>
<head><link rel="tag" href="./widgets/card.html"></head>
<body><card><p id="greeting">Hi</p></card></body>
</html>"""


def compile_set(sources, root):
    loader = TemplateLoader.from_mapping(sources)
    module = asyncio.run(loader.root_load(root))
    return loader, module


class TestTemplateSet:
    """Test compiling a root template with its tags"""

    def test_root_and_tag_compiled(self):
        loader, app = compile_set({"app.html": APP, "widgets/card.html": CARD}, "app.html")

        assert 'var $CARD = require("./widgets/card.html");' in app.text
        assert "var $THIS = function App(body, caller) {" in app.text
        assert "component: $THIS$0" in app.text
        assert 'scope.hookup("greeting", component);' in app.text
        assert app.needed_tags == {"CARD": "./widgets/card.html"}

        card = loader.lookup("widgets/card.html", "")
        assert card.parameter.body is True
        assert "var $THIS = function Card(body, caller) {" in card.text
        assert "if (scope.caller.argument && scope.caller.argument.component) {" in card.text

    def test_compiled_in_completion_order(self):
        loader, _ = compile_set({"app.html": APP, "widgets/card.html": CARD}, "app.html")
        assert [module.id for module in loader.modules_compiled()] == ["widgets/card.html", "app.html"]

    def test_each_module_loaded_once(self):
        """Templates sharing a tag share one compilation"""
        sources = {
            "app.html": """<html><head>
                <link rel="tag" href="./left.html"><link rel="tag" href="./right.html">
                </head><body><left></left><right></right></body></html>""",
            "left.html": '<html><head><link rel="tag" href="./card.html"></head><body><card></card></body></html>',
            "right.html": '<html><head><link rel="tag" href="./card.html"></head><body><card></card></body></html>',
            "card.html": CARD,
        }
        reads = []

        def source_read(module_id):
            reads.append(module_id)
            return sources[module_id]

        loader = TemplateLoader(source_read)
        asyncio.run(loader.root_load("app.html"))

        assert sorted(reads) == ["app.html", "card.html", "left.html", "right.html"]
        assert loader.lookup("./card.html", "left.html") is loader.lookup("./card.html", "right.html")

    def test_xml_template(self):
        sources = {
            "icon.xml": """<html xmlns="http://www.w3.org/1999/xhtml"><head/><body>
                <svg xmlns="http://www.w3.org/2000/svg"><circle r="4"/></svg>
                </body></html>""",
        }
        _, icon = compile_set(sources, "icon.xml")

        assert "var $THIS = function Icon(body, caller) {" in icon.text
        assert 'document.createElementNS("http://www.w3.org/2000/svg", "circle");' in icon.text

    def test_alternate_suffixes_named_like_canonical(self):
        """page.htm names its constructor like page.html, card.xhtml like card.xml"""
        sources = {
            "page.htm": "<html><head></head><body><p>Hi</p></body></html>",
            "widgets/card.xhtml": "<html><head/><body><p>Hi</p></body></html>",
        }
        loader = TemplateLoader.from_mapping(sources)
        page = asyncio.run(loader.root_load("page.htm"))
        card = asyncio.run(loader.root_load("widgets/card.xhtml"))

        assert "var $THIS = function Page(body, caller) {" in page.text
        assert "var $THIS = function Card(body, caller) {" in card.text
        assert page.id == "page.htm"
        assert card.id == "widgets/card.xhtml"

    def test_plain_script_tag(self):
        sources = {
            "app.html": '<html><head><link rel="tag" href="./clock.js"></head><body><clock></clock></body></html>',
            "clock.js": "module.exports = function Clock(body, caller) {};",
        }
        loader, app = compile_set(sources, "app.html")

        assert 'var $CLOCK = require("./clock.js");' in app.text
        assert "component = new $CLOCK(node, callee);" in app.text
        assert loader.lookup("clock.js", "").text == sources["clock.js"]
        assert [module.id for module in loader.modules_compiled()] == ["app.html"]

    def test_inheritance(self):
        sources = {
            "fancy.html": """<html><head><link rel="extends" href="./plain.html"></head>
                <body><super></super><p>More</p></body></html>""",
        }
        _, fancy = compile_set(sources, "fancy.html")

        assert 'var $SUPER = require("./plain.html");' in fancy.text
        assert "$SUPER.apply(this, arguments);" in fancy.text
        assert "$THIS.prototype = Object.create($SUPER.prototype);" in fancy.text
        assert fancy.dependencies == ["./plain.html"]


class TestReexports:
    """Test export forwarding between templates"""

    SOURCES = {
        "alias.html": '<html><head><link rel="exports" href="./widgets/card.html"></head><body></body></html>',
        "widgets/card.html": CARD,
        "app.html": '<html><head><link rel="tag" href="./alias.html"></head><body><alias><b>x</b></alias></body></html>',
    }

    def test_forward_program(self):
        _, alias = compile_set(self.SOURCES, "alias.html")

        assert alias.text == '"use strict";\nmodule.exports = require("./widgets/card.html");\n\n'
        assert alias.redirect == "./widgets/card.html"

    def test_forward_takes_target_parameter(self):
        """A re-export accepts what the forwarded template accepts"""
        loader, app = compile_set(self.SOURCES, "app.html")

        assert loader.lookup("alias.html", "").parameter.body is True
        assert "component: $THIS$0" in app.text


class TestLoadErrors:
    """Test loader failures"""

    def test_missing_root(self):
        with pytest.raises(ModuleLoadError, match="not found"):
            compile_set({}, "app.html")

    def test_missing_tag_module(self):
        sources = {"app.html": '<html><head><link rel="tag" href="./gone.html"></head><body></body></html>'}
        with pytest.raises(ModuleLoadError, match="gone.html"):
            compile_set(sources, "app.html")

    def test_cycle(self):
        sources = {
            "first.html": '<html><head><link rel="tag" href="./second.html"></head><body></body></html>',
            "second.html": '<html><head><link rel="tag" href="./first.html"></head><body></body></html>',
        }
        with pytest.raises(ModuleLoadError, match="cycle"):
            compile_set(sources, "first.html")

    def test_lookup_before_load(self):
        loader = TemplateLoader.from_mapping({})
        with pytest.raises(ModuleLoadError):
            loader.lookup("app.html", "")


class TestDirectoryLoader:
    """Test loading templates from disk"""

    def test_from_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "widgets").mkdir()
            (root / "app.html").write_text(APP, encoding="utf-8")
            (root / "widgets" / "card.html").write_text(CARD, encoding="utf-8")

            loader = TemplateLoader.from_directory(root)
            app = asyncio.run(loader.root_load("app.html"))

            assert "component: $THIS$0" in app.text
            assert len(loader.modules_compiled()) == 2

    def test_ref_resolve(self):
        assert ref_resolve("./icon.html", "widgets/button.html") == "widgets/icon.html"
        assert ref_resolve("../base.html", "widgets/button.html") == "base.html"
        assert ref_resolve("./icon.html", "button.html") == "icon.html"
        assert ref_resolve("shared/list.html", "widgets/button.html") == "shared/list.html"


class TestPipeline:
    """Test the command line pipeline stages"""

    def test_programs_written(self, capsys):
        from tagwright.__main__ import env_check, program_write, results_report, source_compile
        from tagwright.models import ProgramState, pipeline

        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir) / "in"
            outputdir = Path(tmpdir) / "out"
            (inputdir / "widgets").mkdir(parents=True)
            (inputdir / "app.html").write_text(APP, encoding="utf-8")
            (inputdir / "widgets" / "card.html").write_text(CARD, encoding="utf-8")

            state = ProgramState(inputdir=inputdir, outputdir=outputdir, inputFile="app.html", outputSubdir="js")
            final = pipeline(state, env_check, source_compile, program_write, results_report)

            assert final.rootModule.id == "app.html"
            assert (outputdir / "js" / "app.html.js").read_text(encoding="utf-8") == final.rootModule.text
            assert (outputdir / "js" / "widgets" / "card.html.js").is_file()
            assert len(final.writtenFiles) == 2

    def test_compile_error_exits(self, capsys):
        from tagwright.__main__ import env_check, source_compile
        from tagwright.models import ProgramState, pipeline

        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir)
            (inputdir / "app.html").write_text(
                '<html><head><meta accepts="[body] [body]"></head><body></body></html>', encoding="utf-8"
            )
            state = ProgramState(inputdir=inputdir, outputdir=inputdir / "out", inputFile="app.html")

            with pytest.raises(SystemExit):
                pipeline(state, env_check, source_compile)

            assert "Compilation error" in capsys.readouterr().err
