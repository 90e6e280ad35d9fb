import pytest

from analyzer import (
    Binding,
    InvalidArgumentError,
    NodeTable,
    Scope,
    ScopeAnalyzer,
    analyze_scopes,
    walk,
)


def ident(name):
    return {"type": "Identifier", "name": name}


def program(*body):
    return {"type": "Program", "sourceType": "script", "body": list(body)}


def block(*body):
    return {"type": "BlockStatement", "body": list(body)}


def expr(expression):
    return {"type": "ExpressionStatement", "expression": expression}


def var(kind, *names):
    return {
        "type": "VariableDeclaration",
        "kind": kind,
        "declarations": [
            {"type": "VariableDeclarator", "id": ident(name), "init": None} for name in names
        ],
    }


def member(obj, prop, computed=False):
    return {"type": "MemberExpression", "computed": computed, "object": obj, "property": prop}


def function_declaration(name, params, *body):
    return {
        "type": "FunctionDeclaration",
        "id": ident(name) if name else None,
        "params": params,
        "body": block(*body),
    }


def test_var_declarations_hoist_past_blocks():
    inner = var("var", "x")
    fn = function_declaration("f", [], var("var", "x"), block(inner))
    tree = program(fn)
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    scope = analyzer.get_scope(fn)
    assert scope is not None and scope.names() == ["x"]
    binding = scope.get_binding("x")
    assert len(binding.declarations) == 2
    assert analyzer.get_scope(fn["body"]["body"][1]) is None
    assert analyzer.get_binding(inner["declarations"][0]["id"]) is binding


def test_let_declarations_stay_in_their_block():
    inner_block = block(var("let", "x"), expr(ident("x")))
    fn = function_declaration("f", [], var("let", "x"), inner_block, expr(ident("x")))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(program(fn))

    outer = analyzer.get_scope(fn["body"]).get_binding("x")
    inner = analyzer.get_scope(inner_block).get_binding("x")
    assert outer is not inner
    assert analyzer.get_binding(inner_block["body"][1]["expression"]) is inner
    assert analyzer.get_binding(fn["body"]["body"][2]["expression"]) is outer


def test_class_declaration_is_bound_in_function_scope():
    klass = {"type": "ClassDeclaration", "id": ident("C"), "superClass": None,
             "body": {"type": "ClassBody", "body": []}}
    fn = function_declaration("f", [], block(klass))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(program(fn))

    assert analyzer.get_scope(fn).has("C")
    assert analyzer.get_scope(fn["body"]["body"][0]) is None


def test_function_declaration_name_skips_own_scope():
    param = ident("f")
    fn = function_declaration("f", [param], expr(ident("f")))
    tree = program(fn)
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    outer = analyzer.get_scope(tree).get_binding("f")
    assert analyzer.get_binding(fn["id"]) is outer
    assert analyzer.get_binding(fn["body"]["body"][0]["expression"]) is analyzer.get_scope(
        fn
    ).get_binding("f")
    assert analyzer.get_binding(param) is not outer


def test_shorthand_property_is_key_and_reference():
    key = ident("x")
    prop = {"type": "Property", "kind": "init", "computed": False, "method": False,
            "shorthand": True, "key": key, "value": key}
    obj = {"type": "ObjectExpression", "properties": [prop]}
    tree = program(var("var", "x"), expr(obj))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    binding = analyzer.get_scope(tree).get_binding("x")
    assert analyzer.parents.get(key) is prop
    assert binding.references[-1] is key
    assert binding.declarations == [tree["body"][0]["declarations"][0]["id"]]


def test_non_shorthand_key_is_not_a_reference():
    key = ident("x")
    prop = {"type": "Property", "kind": "init", "computed": False, "method": False,
            "shorthand": False, "key": key, "value": {"type": "Literal", "value": 1}}
    tree = program(var("var", "x"), expr({"type": "ObjectExpression", "properties": [prop]}))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    assert analyzer.get_binding(key) is None
    assert all(ref is not key for ref in analyzer.get_scope(tree).get_binding("x").references)


def test_member_access_resolves_object_and_computed_property_only():
    static = member(ident("a"), ident("b"))
    computed = member(ident("a"), ident("b"), computed=True)
    tree = program(var("var", "a", "b"), expr(static), expr(computed))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    scope = analyzer.get_scope(tree)
    assert analyzer.get_binding(static["object"]) is scope.get_binding("a")
    assert analyzer.get_binding(static["property"]) is None
    assert analyzer.get_binding(computed["property"]) is scope.get_binding("b")
    assert all(ref is not static["property"] for ref in scope.get_binding("b").references)
    assert len(scope.get_binding("b").references) == 2


def test_unresolved_identifier_is_free():
    free = ident("window")
    tree = program(var("var", "x"), expr(free))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    assert analyzer.get_binding(free) is None
    assert analyzer.get_scope(tree).undeclared_names() == ["window"]


def test_bare_analyze_leaves_declaration_free_program_unscoped():
    free = ident("y")
    tree = program(expr(free))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)

    assert analyzer.get_scope(tree) is None
    assert analyzer.get_binding(free) is None


def test_analyze_scopes_collects_free_names_without_declarations():
    free = ident("y")
    tree = program(expr(free))
    analyzer = analyze_scopes(tree)

    assert analyzer.get_scope(tree).names() == []
    assert analyzer.get_scope(tree).undeclared_names() == ["y"]
    assert analyzer.get_binding(free) is None


def test_method_keys_are_not_free_names():
    static_key = ident("make")
    computed_key = ident("dynamic")

    def method():
        return {"type": "FunctionExpression", "id": None, "params": [], "body": block()}

    klass = {
        "type": "ClassDeclaration",
        "id": ident("K"),
        "superClass": None,
        "body": {
            "type": "ClassBody",
            "body": [
                {"type": "MethodDefinition", "kind": "method", "static": False,
                 "computed": False, "key": static_key, "value": method()},
                {"type": "MethodDefinition", "kind": "method", "static": False,
                 "computed": True, "key": computed_key, "value": method()},
            ],
        },
    }
    tree = program(klass)
    analyzer = analyze_scopes(tree)

    assert analyzer.get_scope(tree).undeclared_names() == ["dynamic"]


def test_statement_labels_are_not_free_names():
    label = ident("outer")
    loop = {"type": "ForStatement", "init": None, "test": None, "update": None,
            "body": block({"type": "BreakStatement", "label": ident("outer")},
                          {"type": "ContinueStatement", "label": ident("outer")})}
    tree = program({"type": "LabeledStatement", "label": label, "body": loop})
    analyzer = analyze_scopes(tree)

    assert analyzer.get_scope(tree).undeclared_names() == []


def test_annotate_scope_is_idempotent():
    tree = program()
    analyzer = ScopeAnalyzer()
    first = analyzer.annotate_scope(tree, ["window"])
    second = analyzer.annotate_scope(tree)

    assert first is second
    assert first.has("window")
    assert first.get_binding("window").declarations == []


def test_ambient_names_resolve_references():
    ref = ident("document")
    tree = program(expr(ref))
    analyzer = ScopeAnalyzer()
    analyzer.annotate_scope(tree, ["document"])
    analyzer.analyze(tree)

    assert analyzer.get_binding(ref) is analyzer.get_scope(tree).get_binding("document")


def test_nearest_scope_respects_block_flag():
    decl = var("let", "x")
    inner = block(decl)
    fn = function_declaration("f", [], inner)
    tree = program(fn)
    analyzer = ScopeAnalyzer()
    walk(tree, lambda node: None, analyzer.parents)

    assert analyzer.nearest_scope(decl, block_scope=True) is inner
    assert analyzer.nearest_scope(decl) is fn
    assert analyzer.nearest_scope(fn) is tree
    assert analyzer.nearest_scope(tree) is tree


def test_manual_passes_with_external_walk():
    ref = ident("x")
    tree = program(expr(ref), var("var", "x"))
    parents = NodeTable()
    analyzer = ScopeAnalyzer(parents)
    walk(tree, analyzer.run_scope_pass, parents)
    walk(tree, analyzer.run_binding_pass, parents)

    assert analyzer.get_binding(ref) is analyzer.get_scope(tree).get_binding("x")


def test_clear_drops_annotations():
    tree = program(var("var", "x"))
    analyzer = ScopeAnalyzer()
    analyzer.analyze(tree)
    analyzer.clear()

    assert analyzer.get_scope(tree) is None
    assert list(analyzer.scopes()) == []
    analyzer.analyze(tree)
    assert len(analyzer.get_scope(tree).get_binding("x").declarations) == 1


def test_analysis_leaves_tree_dicts_untouched():
    tree = program(var("var", "x"), expr(ident("x")))
    snapshot = repr(tree)
    ScopeAnalyzer().analyze(tree)

    assert repr(tree) == snapshot


@pytest.mark.parametrize("value", [None, "x", 3, {}, {"type": 1}, [ident("x")]])
def test_operations_reject_non_nodes(value):
    analyzer = ScopeAnalyzer()
    with pytest.raises(InvalidArgumentError):
        analyzer.run_scope_pass(value)
    with pytest.raises(InvalidArgumentError):
        analyzer.run_binding_pass(value)
    with pytest.raises(InvalidArgumentError):
        analyzer.annotate_scope(value)
    with pytest.raises(InvalidArgumentError):
        analyzer.analyze(value)


def test_get_binding_requires_identifier():
    analyzer = ScopeAnalyzer()
    with pytest.raises(InvalidArgumentError):
        analyzer.get_binding("x")
    with pytest.raises(InvalidArgumentError):
        analyzer.get_binding({"type": "Literal", "value": 1})


def test_scope_define_merges_declarations():
    scope = Scope()
    first, second = ident("x"), ident("x")
    kept = scope.define(Binding("x", first))
    merged = scope.define(Binding("x", second))

    assert merged is kept
    assert kept.declarations == [first, second]
    assert kept.definition is first


def test_scope_add_requires_existing_name():
    scope = Scope()
    scope.add("missing", ident("missing"))
    assert not scope.has("missing")
    assert scope.get_binding("missing") is None


def test_binding_is_referenced_ignores_declaration_sites():
    decl = ident("x")
    binding = Binding("x", decl)
    binding.add_reference(decl)
    assert not binding.is_referenced()
    binding.add_reference(ident("x"))
    assert binding.is_referenced()
