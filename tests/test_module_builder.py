from textwrap import dedent

import pytest

from tighterror.backend.bits import BitPlan
from tighterror.backend.module_builder import build_module
from tighterror.backend.symbolic import (
    FromValueCheck, InvalidValueCheck, KindConst, UniquenessCheck, VariantTypeCheck,
)
from tighterror.backend.unit_tests import invalid_values
from tighterror.parser import parse_yaml_str
from tighterror.semantics.validator import validate
from tighterror.semantics.symbols import SymbolTable
from tighterror.spec import definitions as defs
from tighterror.spec.model import CategorySpec, ErrorSpec, ModuleSpec

STD_CASES = [
    "test_category_name",
    "test_category_display",
    "test_category_uniqueness",
    "test_category_values",
    "test_err_kind_name",
    "test_err_kind_display",
    "test_err_kind_uniqueness",
    "test_err_kind_value_uniqueness",
    "test_err_kind_values",
    "test_err_kind_category",
    "test_err_kind_from_value",
    "test_err_kind_from_invalid_value",
    "test_err_display",
]

NO_STD_CASES = [
    "test_category_name",
    "test_category_values",
    "test_err_kind_name",
    "test_err_kind_values",
    "test_err_kind_category",
    "test_err_kind_from_value",
    "test_err_kind_from_invalid_value",
]


def spec_from_yaml(text: str):
    spec = parse_yaml_str(text)
    validate(spec)
    return spec


def build(text: str, test: bool = True, index: int = 0):
    spec = spec_from_yaml(dedent(text))
    module = spec.modules[index]
    return build_module(spec.main, module, BitPlan.calculate(module),
                        SymbolTable.build(module), test)


S3 = """\
module:
  flat_kinds: {flat}
categories:
  - name: Parsing
    errors: [P, Q]
  - name: Processing
    errors: [Q, R]
"""


def test_kind_constants_nested_per_category():
    mod = build(S3.format(flat="false"))
    assert mod.kinds.ident == "kinds"
    assert mod.kinds.consts == ()
    parsing, processing = mod.kinds.children
    assert parsing.ident == "parsing"
    assert [(k.ident, k.value) for k in parsing.consts] == [("P", 0), ("Q", 1)]
    assert [(k.ident, k.value) for k in processing.consts] == [("Q", 2), ("R", 3)]
    assert parsing.doc == "Error kinds of category Parsing."


def test_kind_constants_flat():
    mod = build("""\
        module:
          flat_kinds: true
        categories:
          - name: Parsing
            errors: [P, Q]
          - name: Processing
            errors: [R]
    """)
    assert mod.kinds.children == ()
    assert [(k.ident, k.cat_index, k.var_index, k.value) for k in mod.kinds.consts] == [
        ("P", 0, 0, 0), ("Q", 0, 1, 1), ("R", 1, 0, 2),
    ]


def test_category_constants():
    mod = build(S3.format(flat="false"))
    assert mod.categories.ident == "categories"
    assert [(c.ident, c.name, c.index) for c in mod.categories.consts] == [
        ("PARSING", "Parsing", 0), ("PROCESSING", "Processing", 1),
    ]


def test_layout_and_tables():
    mod = build("""\
        categories:
          - name: First
            errors: [A, B, C]
          - name: Second
            errors: [D, E, F, G, H]
          - name: Third
            errors:
              - I: the i
              - J
    """)
    layout = mod.layout
    assert (layout.repr_bits, layout.kind_bits, layout.cat_bits, layout.var_bits) == (8, 5, 2, 3)
    assert (layout.cat_mask, layout.var_mask, layout.kind_mask) == (0b11000, 0b00111, 0b11111)
    assert layout.cat_max == 2
    assert layout.var_maxes == (2, 4, 1)
    assert mod.tables.category_names == ("First", "Second", "Third")
    assert mod.tables.kind_names == (("A", "B", "C"), ("D", "E", "F", "G", "H"), ("I", "J"))
    assert mod.tables.kind_displays[2] == ("the i", "J")
    assert [k.value for k in mod.iter_kind_consts()] == [0, 1, 2, 8, 9, 10, 11, 12, 16, 17]


def test_doc_precedence():
    mod = build("""\
        module:
          doc_from_display: true
        categories:
          - name: Quiet
            doc_from_display: false
            errors:
              - name: A
                display: a display
              - name: B
                display: b display
                doc_from_display: true
              - name: C
                display: c display
                doc: c doc
          - name: Loud
            errors:
              - name: D
                display: d display
              - E
    """)
    docs = {k.name: k.doc for k in mod.iter_kind_consts()}
    assert docs == {"A": "", "B": "b display", "C": "c doc", "D": "d display", "E": ""}


def test_doc_from_display_defaults_to_false():
    mod = build("errors:\n  - A: a display\n")
    assert [k.doc for k in mod.iter_kind_consts()] == [""]


def test_type_descriptors():
    mod = build("""\
        module:
          doc: Module doc.
          err_name: AppError
          err_kind_name: AppErrorKind
          err_cat_name: AppErrorCategory
          err_doc: Error doc.
          result_from_err: false
        errors: [A]
    """)
    assert mod.doc == "Module doc."
    assert mod.error_type.name == "AppError"
    assert mod.error_type.doc == "Error doc."
    assert mod.error_type.kind_type == "AppErrorKind"
    assert mod.error_type.error_trait
    assert not mod.error_type.result_from_err
    assert mod.kind_type.name == "AppErrorKind"
    assert mod.kind_type.doc == defs.DEFAULT_ERR_KIND_DOC
    assert mod.kind_type.result_from_kind
    assert not mod.kind_type.checks_category
    assert mod.category_type.name == "AppErrorCategory"


def test_no_std_disables_error_trait():
    mod = build("main:\n  no_std: true\nerrors:\n  - name: A\n    variant_type: true\n")
    assert not mod.error_type.error_trait
    assert not mod.variant_types[0].error_trait


def test_error_trait_off():
    mod = build("module:\n  error_trait: false\nerrors: [A]\n")
    assert not mod.error_type.error_trait


def test_variant_types():
    mod = build("""\
        categories:
          - name: Io
            errors:
              - NotFound
              - name: Denied
                display: access denied
                doc: Denied doc.
                variant_type_name: DeniedError
    """)
    (vt,) = mod.variant_types
    assert vt.ident == "DeniedError"
    assert vt.name == "Denied"
    assert vt.doc == "Denied doc."
    assert vt.kind.path == "kinds.io.DENIED"
    assert vt.category.path == "categories.IO"
    assert vt.error_type == "Error"


def test_no_tests_unless_requested():
    assert build("errors: [A]\n", test=False).tests is None


def test_test_suite_cases():
    mod = build("errors: [A, B]\n")
    assert mod.tests.name == "TighterrorTests"
    assert [c.name for c in mod.tests.cases] == STD_CASES


def test_test_suite_cases_no_std():
    mod = build("main:\n  no_std: true\nerrors: [A, B]\n")
    assert [c.name for c in mod.tests.cases] == NO_STD_CASES
    checks = [chk for case in mod.tests.cases for chk in case.checks]
    assert not any(isinstance(chk, UniquenessCheck) for chk in checks)


def test_test_suite_variant_types():
    mod = build("errors:\n  - A\n  - name: B\n    variant_type: true\n")
    case = mod.tests.cases[-1]
    assert case.name == "test_variant_types"
    (check,) = case.checks
    assert isinstance(check, VariantTypeCheck)
    assert check.variant == "B"
    assert check.kind.path == "kinds.general.B"


def test_test_suite_checks_every_kind():
    mod = build(S3.format(flat="false"))
    by_name = {c.name: c for c in mod.tests.cases}
    from_value = by_name["test_err_kind_from_value"].checks
    assert all(isinstance(c, FromValueCheck) for c in from_value)
    assert [c.kind.path for c in from_value] == [
        "kinds.parsing.P", "kinds.parsing.Q", "kinds.processing.Q", "kinds.processing.R",
    ]
    (invalid,) = by_name["test_err_kind_from_invalid_value"].checks
    assert isinstance(invalid, InvalidValueCheck)
    assert invalid.values == (4,)


def test_build_is_deterministic():
    assert build(S3.format(flat="false")) == build(S3.format(flat="false"))


@pytest.mark.parametrize("sizes, values", [
    ((1,), (1, 2)),
    ((256,), (256,)),
    ((3, 5, 2), (3, 13, 18, 24, 32)),
])
def test_invalid_values(sizes, values):
    module = ModuleSpec(categories=[
        CategorySpec(f"C{i}", errors=[ErrorSpec(f"E{j}") for j in range(n)])
        for i, n in enumerate(sizes)
    ])
    plan = BitPlan.calculate(module)
    assert invalid_values(plan) == values
    assert not any(plan.is_valid(v) for v in values)


def test_stale_symbols_are_internal_error():
    spec = spec_from_yaml("errors: [A, B]\n")
    module = spec.modules[0]
    other = spec_from_yaml("categories:\n  - name: X\n    errors: [A]\n  - name: Y\n    errors: [B]\n")
    with pytest.raises(RuntimeError):
        build_module(spec.main, module, BitPlan.calculate(module),
                     SymbolTable.build(other.modules[0]), test=False)


def test_kind_const_is_symbolic():
    mod = build("errors: [A]\n")
    (const,) = mod.iter_kind_consts()
    assert isinstance(const, KindConst)
