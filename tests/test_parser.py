from textwrap import dedent

import pytest

from tighterror.internals.errors import TighterrorError
from tighterror.parser import parse, parse_toml_str, parse_yaml_str


def yaml_error(text: str) -> TighterrorError:
    with pytest.raises(TighterrorError) as ei:
        parse_yaml_str(dedent(text))
    return ei.value


# ---- YAML: accepted forms ----

def test_implicit_module_and_category():
    spec = parse_yaml_str("errors: [BadFile, Timeout]\n")
    assert len(spec.modules) == 1
    module = spec.modules[0]
    assert module.name == "errors"
    assert [c.name for c in module.categories] == ["General"]
    assert [e.name for e in module.categories[0].errors] == ["BadFile", "Timeout"]


def test_error_item_forms():
    spec = parse_yaml_str(dedent("""\
        errors:
          - Plain
          - Short: short display
          - name: Long
            display: long display
            doc: Long doc.
            doc_from_display: false
            variant_type_name: LongError
    """))
    plain, short, long = spec.modules[0].categories[0].errors
    assert (plain.name, plain.display) == ("Plain", None)
    assert (short.name, short.display) == ("Short", "short display")
    assert long.name == "Long"
    assert long.display == "long display"
    assert long.doc == "Long doc."
    assert long.doc_from_display is False
    assert long.variant_type is None
    assert long.variant_type_name == "LongError"
    assert long.has_variant_type


def test_variant_type_flag_overrides_name():
    spec = parse_yaml_str(dedent("""\
        errors:
          - name: A
            variant_type: false
            variant_type_name: AError
          - name: B
            variant_type: true
          - C
    """))
    a, b, c = spec.modules[0].categories[0].errors
    assert not a.has_variant_type
    assert b.has_variant_type and b.resolved_variant_type_name == "B"
    assert not c.has_variant_type


def test_module_object_and_root_category():
    spec = parse_yaml_str(dedent("""\
        main:
          output: out.py
          no_std: true
        module:
          name: app
          doc: App errors.
          err_name: AppError
          flat_kinds: true
        category:
          name: Io
          doc: I/O errors.
        errors: [NotFound]
    """))
    assert spec.main.output == "out.py"
    assert spec.main.resolved_no_std
    assert not spec.main.resolved_separate_files
    module = spec.modules[0]
    assert module.name == "app"
    assert module.doc == "App errors."
    assert module.resolved_err_name == "AppError"
    assert module.resolved_err_kind_name == "ErrorKind"
    assert module.resolved_flat_kinds
    cat = module.categories[0]
    assert (cat.name, cat.doc) == ("Io", "I/O errors.")
    assert [e.name for e in cat.errors] == ["NotFound"]


def test_modules_list():
    spec = parse_yaml_str(dedent("""\
        modules:
          - name: a
            errors: [X]
          - name: b
            categories:
              - name: First
                errors: [Y]
              - name: Second
                errors: [Z]
    """))
    a, b = spec.modules
    assert a.name == "a" and [c.name for c in a.categories] == ["General"]
    assert b.name == "b" and [c.name for c in b.categories] == ["First", "Second"]


def test_spans_point_at_items():
    spec = parse_yaml_str("errors:\n  - BadFile\n  - Other\n")
    errs = spec.modules[0].categories[0].errors
    assert (errs[0].span.line, errs[0].span.col) == (2, 5)
    assert (errs[1].span.line, errs[1].span.col) == (3, 5)


@pytest.mark.parametrize("literal", ["true", "True", "TRUE"])
def test_strict_booleans_accepted(literal):
    spec = parse_yaml_str(f"module:\n  flat_kinds: {literal}\nerrors: [A]\n")
    assert spec.modules[0].flat_kinds is True


@pytest.mark.parametrize("literal", ["yes", "on", "1", "y"])
def test_yaml_11_booleans_rejected(literal):
    e = yaml_error(f"module:\n  flat_kinds: {literal}\nerrors: [A]\n")
    assert e.kind == "BAD_VALUE_TYPE"


# ---- YAML: rejected documents ----

@pytest.mark.parametrize("text, kind", [
    ("errors: [A\n", "BAD_YAML"),
    ("", "BAD_YAML"),
    ("errors: [A]\n---\nerrors: [B]\n", "BAD_YAML"),
    ("errors: [A]\nerrors: [B]\n", "BAD_YAML"),
    ("- A\n", "BAD_VALUE_TYPE"),
    ("bogus: 1\nerrors: [A]\n", "BAD_ROOT_LEVEL_KEYWORD"),
    ("1: x\nerrors: [A]\n", "BAD_KEYWORD_TYPE"),
    ("module: {}\nmodules: []\n", "MUTUALLY_EXCLUSIVE_KEYWORDS"),
    ("category: {}\ncategories: []\n", "MUTUALLY_EXCLUSIVE_KEYWORDS"),
    ("errors: [A]\ncategories: []\n", "MUTUALLY_EXCLUSIVE_KEYWORDS"),
    ("modules: []\nerrors: [A]\n", "MUTUALLY_EXCLUSIVE_KEYWORDS"),
    ("module:\n  name: a\n", "MISSING_ATTRIBUTE"),
    ("module:\n  errors: [A]\n", "BAD_OBJECT_ATTRIBUTE"),
    ("category:\n  errors: [A]\nerrors: [B]\n", "BAD_OBJECT_ATTRIBUTE"),
    ("modules:\n  - errors: [A]\n", "MISSING_ATTRIBUTE"),
    ("modules: []\n", "EMPTY_LIST"),
    ("categories:\n  - name: A\n", "MISSING_ATTRIBUTE"),
    ("categories:\n  - errors: [A]\n", "MISSING_ATTRIBUTE"),
    ("errors: []\n", "EMPTY_LIST"),
    ("errors: A\n", "BAD_VALUE_TYPE"),
    ("errors: [1]\n", "BAD_VALUE_TYPE"),
    ("errors:\n  - A: 1\n", "BAD_VALUE_TYPE"),
    ("errors:\n  - display: x\n", "MISSING_ATTRIBUTE"),
    ("errors:\n  - name: A\n    bogus: 1\n", "BAD_OBJECT_ATTRIBUTE"),
    ("main:\n  output: 1\nerrors: [A]\n", "BAD_VALUE_TYPE"),
    ("main:\n  bogus: 1\nerrors: [A]\n", "BAD_OBJECT_ATTRIBUTE"),
    ("main: []\nerrors: [A]\n", "BAD_VALUE_TYPE"),
])
def test_yaml_rejected(text, kind):
    assert yaml_error(text).kind == kind


def test_yaml_error_carries_span():
    e = yaml_error("errors:\n  - name: A\n    bogus: 1\n")
    assert e.span is not None
    assert (e.span.line, e.span.col) == (3, 5)


# ---- TOML ----

def test_toml_document(fixtures_dir):
    spec = parse_toml_str((fixtures_dir / "simple.toml").read_text(encoding="utf-8"))
    module = spec.modules[0]
    assert module.name == "app_errors"
    assert module.resolved_flat_kinds
    assert [c.name for c in module.categories] == ["Io", "Net"]
    io = module.categories[0]
    assert [(e.name, e.display) for e in io.errors] == [
        ("NotFound", "not found"), ("Denied", "permission denied"),
    ]
    assert io.errors[0].span is None
    assert spec.main.no_std is False


def test_toml_mixed_error_items():
    spec = parse_toml_str('errors = ["A", { B = "b display" }, { name = "C", doc = "C doc." }]\n')
    a, b, c = spec.modules[0].categories[0].errors
    assert a.name == "A"
    assert (b.name, b.display) == ("B", "b display")
    assert (c.name, c.doc) == ("C", "C doc.")


@pytest.mark.parametrize("text, kind", [
    ("errors = [\n", "BAD_TOML"),
    ("bogus = 1\nerrors = [\"A\"]\n", "BAD_ROOT_LEVEL_KEYWORD"),
    ("errors = []\n", "EMPTY_LIST"),
    ("[module]\nflat_kinds = \"yes\"\n[[categories]]\nname = \"A\"\nerrors = [\"B\"]\n", "BAD_VALUE_TYPE"),
])
def test_toml_rejected(text, kind):
    with pytest.raises(TighterrorError) as ei:
        parse_toml_str(text)
    assert ei.value.kind == kind


# ---- Files ----

def test_parse_by_extension(fixtures_dir):
    assert parse(fixtures_dir / "simple.yaml").modules[0].name == "errors"
    assert parse(fixtures_dir / "simple.toml").modules[0].name == "app_errors"


def test_parse_sets_path_and_source(fixtures_dir):
    path = fixtures_dir / "simple.yaml"
    spec = parse(path)
    assert spec.path == path
    assert spec.filename == str(path)
    assert "BadFile" in spec.source


def test_yml_extension(spec_file):
    path = spec_file("errors: [A]\n", name="errs.yml")
    assert parse(path).modules[0].categories[0].errors[0].name == "A"


def test_default_search_order(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "tighterror.toml").write_text('errors = ["FromToml"]\n', encoding="utf-8")
    assert parse().modules[0].categories[0].errors[0].name == "FromToml"

    (tmp_path / "tighterror.yaml").write_text("errors: [FromYaml]\n", encoding="utf-8")
    assert parse().modules[0].categories[0].errors[0].name == "FromYaml"


def test_no_default_spec(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(TighterrorError) as ei:
        parse()
    assert ei.value.kind == "SPEC_FILE_NOT_FOUND"


def test_missing_file(tmp_path):
    with pytest.raises(TighterrorError) as ei:
        parse(tmp_path / "missing.yaml")
    assert ei.value.kind == "SPEC_FILE_NOT_FOUND"


def test_bad_extension(spec_file):
    path = spec_file("{}", name="spec.json")
    with pytest.raises(TighterrorError) as ei:
        parse(path)
    assert ei.value.kind == "BAD_SPEC_FILE_EXTENSION"


def test_unreadable_file(tmp_path):
    path = tmp_path / "dir.yaml"
    path.mkdir()
    with pytest.raises(TighterrorError) as ei:
        parse(path)
    assert ei.value.kind == "FAILED_TO_OPEN_SPEC_FILE"


def test_parse_error_names_file(spec_file):
    path = spec_file("bogus: 1\n")
    with pytest.raises(TighterrorError) as ei:
        parse(path)
    assert ei.value.filename == str(path)
